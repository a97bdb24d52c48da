"""Allow ``python -m xml_to_json_parser``."""

import sys

from xml_to_json_parser.cli.main import main

sys.exit(main())
