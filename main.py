"""
Vision OCR to PAGE XML - Command-line Entry Point

Sends one image to Google Cloud Vision and saves the result as PAGE XML.

Usage:
    python main.py -i page.png -o page.xml -c key.json -l en
    python main.py -i photo.jpg -o objects.xml -c key.json -m object
"""
import argparse
import sys
from typing import List, Optional

from api.core import config, init_logger, generate_request_id, set_request_id
from app.engines import ConversionError, ErrorCode, OcrToPageConverter, RecognitionMode


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="vision2page",
        description="Google Cloud Vision OCR to PAGE XML",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit codes:
    0 success, 1 service error, 2 no page in result, 3 I/O error,
    4 credentials file not found, 5 general error, 6 image not found,
    7 upload size limit exceeded, 8 no objects in result
        """
    )

    parser.add_argument(
        "-i", "--img",
        type=str,
        required=True,
        help="Image file to process"
    )

    parser.add_argument(
        "-o", "--output",
        type=str,
        required=True,
        help="PAGE XML output file path"
    )

    parser.add_argument(
        "-l", "--lang",
        type=str,
        default=None,
        help="Language hint (e.g. 'en')"
    )

    parser.add_argument(
        "-c", "--credentials",
        type=str,
        default=config.CREDENTIALS_PATH or None,
        help="Google Cloud service key JSON file (default: $GOOGLE_APPLICATION_CREDENTIALS)"
    )

    parser.add_argument(
        "-m", "--mode",
        type=str,
        choices=[m.value for m in RecognitionMode],
        default=RecognitionMode.OCR.value,
        help="Recognition mode (default: ocr)"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output"
    )

    args = parser.parse_args(argv)
    if not args.credentials:
        parser.error("the following arguments are required: -c/--credentials")
    return args


def run(args: argparse.Namespace) -> ErrorCode:
    """Run one conversion and return its exit code."""
    try:
        OcrToPageConverter.check_image(args.img)
        converter = OcrToPageConverter.from_credentials_file(args.credentials)
    except ConversionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return e.code
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return ErrorCode.GENERAL_ERROR

    return converter.run(args.img, args.output, RecognitionMode(args.mode), args.lang)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logger = init_logger("DEBUG" if args.debug else None)
    set_request_id(generate_request_id())
    logger.debug(
        "Arguments parsed",
        extra={"extra_data": {"img": args.img, "output": args.output, "lang": args.lang,
                              "credentials": args.credentials, "mode": args.mode}}
    )

    code = run(args)
    print(f"Exit code: {int(code)}")
    return int(code)


if __name__ == "__main__":
    sys.exit(main())
