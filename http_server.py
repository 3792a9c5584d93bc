#!/usr/bin/env python3
"""
DiscoMix HTTP Server Runner
"""

import os

from dotenv import load_dotenv

from discomix.crosscutting.logging import setup_logging
from discomix.interfaces.http import HTTPServer


def main():
    """Run the HTTP server."""
    load_dotenv()
    setup_logging(level=os.getenv('DISCOMIX_LOG_LEVEL', 'INFO'))
    server = HTTPServer(
        host=os.getenv('DISCOMIX_HOST', 'localhost'),
        port=int(os.getenv('DISCOMIX_PORT', '3000')),
        debug=os.getenv('DISCOMIX_DEBUG') == '1'
    )
    server.run()


if __name__ == '__main__':
    main()
