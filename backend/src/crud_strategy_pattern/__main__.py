from crud_strategy_pattern.cli import cli

if __name__ == "__main__":
    cli()
