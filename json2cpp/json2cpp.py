"""

Command line utility to generate C++ structs and JSON serialization code from JSON documents.

"""


import argparse
import json
import logging
import os
import sys
from json2cpp import _version

ARG_TYPES = {'str': str, 'int': int}


def load_commands():
    """Load the commands from the commands.json file."""
    commands_path = os.path.join(os.path.dirname(__file__), 'commands.json')
    with open(commands_path, 'r', encoding='utf-8') as f:
        return json.load(f)


def create_subparsers(subparsers, commands):
    """Create subparsers for the commands."""
    for command in commands:
        cmd_parser = subparsers.add_parser(command['command'], help=command['description'])
        for arg in command['args']:
            names = [arg['name']] + arg.get('aliases', [])
            kwargs = {
                'help': arg['help'],
            }
            if 'choices' in arg:
                kwargs['choices'] = arg['choices']
            if 'default' in arg:
                kwargs['default'] = arg['default']
            if arg['type'] == 'bool':
                kwargs['action'] = 'store_true'
            else:
                kwargs['type'] = ARG_TYPES[arg['type']]
            carg = cmd_parser.add_argument(*names, **kwargs)
            if arg['name'].startswith('-'):
                carg.required = arg.get('required', True)


def dynamic_import(module, func):
    """Dynamically import a module and function."""
    mod = __import__(module, fromlist=[func])
    return getattr(mod, func)


def main(argv=None):
    """Main function for the command line utility."""
    commands = load_commands()
    parser = argparse.ArgumentParser(description='Generate C++ structs and JSON serialization code from JSON documents.')
    parser.add_argument('--version', action='store_true', help='Print the version of json2cpp.')
    parser.add_argument('--verbose', action='store_true', help='Log progress to stderr.')

    subparsers = parser.add_subparsers(dest='command')
    create_subparsers(subparsers, commands)

    args = parser.parse_args(argv)

    if args.version:
        print(f'json2cpp {_version.version}')
        return

    if args.command is None:
        parser.print_help()
        return

    logging.basicConfig(stream=sys.stderr, level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    try:
        command = next((cmd for cmd in commands if cmd['command'] == args.command), None)
        if not command:
            print(f"Error: Command {args.command} not found.", file=sys.stderr)
            sys.exit(1)

        module_name, func_name = command['function']['name'].rsplit('.', 1)
        func = dynamic_import(module_name, func_name)
        func_args = {}
        for arg, val in command['function']['args'].items():
            if val.startswith('args.'):
                if hasattr(args, val[5:]):
                    func_args[arg] = getattr(args, val[5:])
            else:
                func_args[arg] = val
        result = func(**func_args)

        for path in result.files:
            print(f'Generated: {path}')
        print(f'Structs: {result.struct_count}')

    except Exception as e:  # pylint: disable=broad-except
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
