#!/usr/bin/env python3
"""
main.py

Run the subscribe function locally against the real Mailchimp API.
Credentials come from the environment or a .env file (see config.py).

    python -m mailchimp_subscribe.main --email jane@example.com --list-id a1b2c3d4e5
    python -m mailchimp_subscribe.main --email jane@example.com --list-id a1b2c3d4e5 \\
        --interest 9f8e7d6c5b --merge-field FNAME=Jane
"""
import argparse
import json
import sys
from typing import Dict, List, Optional

from .handler import handler


def parse_merge_fields(pairs: List[str]) -> Dict[str, str]:
    merge_fields = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"merge field must look like KEY=VALUE: {pair!r}")
        merge_fields[key] = value
    return merge_fields


def build_event(args: argparse.Namespace) -> Dict:
    body = {"email": args.email, "list_id": args.list_id}
    if args.interest:
        body["interests"] = args.interest
    if args.merge_field:
        body["merge_fields"] = parse_merge_fields(args.merge_field)
    return {"httpMethod": "POST", "body": json.dumps(body)}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point with argument parsing."""
    parser = argparse.ArgumentParser(
        description="Subscribe an email address to a Mailchimp list",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --email jane@example.com --list-id a1b2c3d4e5
  %(prog)s --email jane@example.com --list-id a1b2c3d4e5 --interest 9f8e7d6c5b
        """
    )
    parser.add_argument("--email", required=True, help="Email address to subscribe")
    parser.add_argument("--list-id", required=True, help="Mailchimp list (audience) id")
    parser.add_argument("--interest", action="append", default=[], metavar="INTEREST_ID",
                        help="Interest id to enable (repeatable)")
    parser.add_argument("--merge-field", action="append", default=[], metavar="KEY=VALUE",
                        help="Merge field for new members (repeatable)")
    args = parser.parse_args(argv)

    try:
        event = build_event(args)
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))

    result = handler(event)
    body = json.loads(result["body"])

    if result["statusCode"] >= 400:
        print(f"❌ {result['statusCode']}: {body['error']}")
    else:
        print(f"✅ {result['statusCode']}")
    print(json.dumps(body, indent=2))
    return 0 if result["statusCode"] < 400 else 1


if __name__ == "__main__":
    sys.exit(main())
