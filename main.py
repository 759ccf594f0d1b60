#!/usr/bin/env python3
"""
Loudness Analyzer - Einstiegspunkt

Offline-Messung und Normalisierung von Audiodateien (Peak, RMS, EBU R128).

Verwendung:
    python main.py analyze <audio_file>
    python main.py normalize <input> <output> [--platform NAME | --r128]

Beispiel:
    python main.py normalize recording.wav master.wav --platform spotify
"""

import sys


def main():
    """Start the Loudness Analyzer command line."""
    # Check Python version
    if sys.version_info < (3, 10):
        print("Error: Python 3.10 or higher is required.")
        print(f"Current version: {sys.version}")
        sys.exit(1)

    from loudness_analyzer.cli import main as cli_main

    sys.exit(cli_main())


if __name__ == "__main__":
    main()
