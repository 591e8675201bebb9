from typesplit.cli import app

app()
