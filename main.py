#!/usr/bin/env python3
"""
EDI to XML Command Line Tool

Parses an X12 EDI file and writes it out as XML, using field positions as tag names.

Usage:
    python main.py input.edi                               # Convert input.edi to input.xml
    python main.py input.edi output.xml                    # Convert to a specific output file
    python main.py input.edi output.xml --no-indent        # Compact XML
    python main.py input.edi output.xml --no-header        # Drop the <?xml ...?> declaration
"""

import argparse
import logging
import sys
from pathlib import Path

# Try importing from installed package first, fallback to src path
try:
    from edi_parser import EdiParser
except ImportError:
    # Add src to path for imports when not installed
    sys.path.insert(0, str(Path(__file__).parent / "src"))
    from edi_parser import EdiParser

logger = logging.getLogger("edi_to_xml")


def convert_edi_file(input_file: str, output_file: str, indent: bool = True, include_header: bool = True) -> int:
    """Convert an EDI file to XML and save the result."""

    print(f"EDI to XML - Processing {input_file}")
    print("=" * 50)

    try:
        parser = EdiParser()
        parser.load_file(input_file)
        print(f"Loaded {parser.row_count()} rows")

        parser.parse()
        print("EDI parsed successfully!")

        print(f"\nParsing Results:")
        print(f"  Document Type: {parser.doc_type() or 'UNKNOWN'}")
        print(f"  Functional Groups: {len(parser.groups())}")
        print(f"  Transaction Sets: {len(parser.transactions() or [])}")
        for warning in parser.document.warnings:
            print(f"  Warning: {warning.message}")

        xml_output = parser.serialize(indent=indent, include_header=include_header)
        if xml_output is None:
            print("Error: EDI document could not be converted to XML")
            return 1

        with open(output_file, 'w', encoding='utf-8') as f:
            f.write(xml_output)

        print(f"\nXML output saved to: {output_file}")
        print(f"Output size: {len(xml_output):,} characters")
        return 0

    except FileNotFoundError as e:
        print(f"Error: File not found: {e}")
        return 1
    except Exception as e:
        logger.error(f"Error during EDI processing: {e}", exc_info=True)
        return 1


def main(argv=None):
    """Main entry point with command line argument parsing."""

    parser = argparse.ArgumentParser(
        description="Convert EDI files to XML",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py invoice.edi                        # Convert invoice.edi -> invoice.xml
  python main.py invoice.edi out.xml --no-indent    # Compact output
        """
    )

    parser.add_argument('input_file', help='Input EDI file')
    parser.add_argument('output_file', nargs='?',
                       help='Output XML file (default: input_file.xml)')
    parser.add_argument('--no-indent', dest='indent', action='store_false',
                       help='Write compact XML instead of indented XML')
    parser.add_argument('--no-header', dest='include_header', action='store_false',
                       help='Leave out the XML declaration')
    parser.add_argument('--log-level', default='WARNING',
                       help='Logging level (default: WARNING)')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="[%(asctime)s] [%(levelname)s] [%(name)s:%(lineno)d] - %(message)s",
    )

    if not args.output_file:
        args.output_file = str(Path(args.input_file).with_suffix('.xml'))

    if not Path(args.input_file).exists():
        print(f"Error: Input file not found: {args.input_file}")
        return 1

    return convert_edi_file(args.input_file, args.output_file, args.indent, args.include_header)


if __name__ == "__main__":
    sys.exit(main())
