"""
Main entry point for the reposter bot.

Usage: python main.py --cfg config.json [--debug]
"""
from reposter.main import run

if __name__ == "__main__":
    run()
