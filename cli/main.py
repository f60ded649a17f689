"""`python -m cli.main` 用のエントリポイント"""
from cli.ctcert.cli import app

if __name__ == '__main__':
    app()
