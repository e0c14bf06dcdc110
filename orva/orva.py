"""

Command line utility to derive Avro schemas from Python types.

"""

import argparse
import sys

from orva import _version
from orva.common import load_avro_schema_file, schemas_equal
from orva.typetoavro import get_schema, load_type


def create_parser():
    """Create the argument parser."""
    parser = argparse.ArgumentParser(description='Derive the Avro schema of a Python type.')
    parser.add_argument('--version', action='store_true', help='Print the version of Orva.')
    parser.add_argument('type', nargs='?', help='The type to derive, as package.module:Qualified.Name.')
    parser.add_argument('--out', type=str, default=None, help='Path of the output Avro schema file. Prints to stdout if omitted.')
    parser.add_argument('--nested', action='store_true', help='Nest field schemas as JSON objects instead of embedding them as strings.')
    parser.add_argument('--compare', type=str, default=None, help='Path of a reference Avro schema file to compare the result with.')
    return parser


def main():
    """Main function for the command line utility."""
    parser = create_parser()
    args = parser.parse_args()

    if getattr(args, 'version', False):
        print(f'Orva {_version.version}')
        return

    if not getattr(args, 'type', None):
        parser.print_help()
        return

    try:
        schema = get_schema(load_type(args.type), embed_field_schemas=not getattr(args, 'nested', False))
        output_file_path = getattr(args, 'out', None)
        if output_file_path:
            print(f'Writing Avro schema of {args.type} to {output_file_path}')
            with open(output_file_path, 'w', encoding='utf-8') as f:
                f.write(schema)
        else:
            sys.stdout.write(schema + '\n')

        compare_file_path = getattr(args, 'compare', None)
        if compare_file_path and not schemas_equal(schema, load_avro_schema_file(compare_file_path)):
            print(f"Error:  Schema of {args.type} differs from {compare_file_path}")
            sys.exit(1)
    except Exception as e:  # pylint: disable=broad-except
        print("Error: ", str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
