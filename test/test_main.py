import argparse
import contextlib
import io
import os
import shutil
import sys
import tempfile
import unittest
from unittest.mock import patch

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from json2cpp import _version
from json2cpp.json2cpp import main, load_commands


def get_json():
    """Provides the JSON input file path."""
    return os.path.join(os.path.dirname(__file__), 'jsons', 'person.json')


def get_orders():
    """Provides the glob pattern of the order documents."""
    return os.path.join(os.path.dirname(__file__), 'jsons', 'orders', '*.json')


class TestMain(unittest.TestCase):

    def setUp(self):
        self.output_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.output_dir, ignore_errors=True)

    def run_main(self, argv):
        """Runs the command line and captures its output."""
        stdout, stderr = io.StringIO(), io.StringIO()
        exit_code = 0
        with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stderr):
            try:
                main(argv)
            except SystemExit as e:
                exit_code = e.code
        return exit_code, stdout.getvalue(), stderr.getvalue()

    @patch('argparse.ArgumentParser.parse_args', return_value=argparse.Namespace(command=None, version=False, verbose=False))
    def test_main_no_command(self, mock_parse_args):
        """Test main function with no command."""
        with patch('argparse.ArgumentParser.print_help') as mock_print_help:
            main()
        mock_print_help.assert_called_once()

    def test_main_version(self):
        """Test the --version flag."""
        exit_code, stdout, _ = self.run_main(['--version'])
        self.assertEqual(exit_code, 0)
        self.assertEqual(stdout.strip(), f'json2cpp {_version.version}')

    def test_main_j2cpp_command(self):
        """Test main function with j2cpp command."""
        exit_code, stdout, stderr = self.run_main(['j2cpp', get_json(), '--out', self.output_dir])
        self.assertEqual(exit_code, 0, stderr)
        lines = stdout.strip().splitlines()
        self.assertEqual(lines, [
            f"Generated: {os.path.join(self.output_dir, 'types.h')}",
            f"Generated: {os.path.join(self.output_dir, 'rapidjson_serializer.h')}",
            "Structs: 4",
        ])
        self.assertTrue(os.path.exists(os.path.join(self.output_dir, 'types.h')))

    def test_main_j2cpp_merge(self):
        """Test main function with j2cpp command in merge mode."""
        exit_code, stdout, stderr = self.run_main([
            'j2cpp', get_orders(), '-o', self.output_dir, '--merge', '--parser', 'nlohmann',
            '--namespace', 'shop', '--camelcase', '--optional-null', '--string-ref', '--root-name', 'Order'])
        self.assertEqual(exit_code, 0, stderr)
        self.assertIn("Structs: 3", stdout)
        with open(os.path.join(self.output_dir, 'types.h'), 'r', encoding='utf-8') as f:
            types_h = f.read()
        self.assertIn("struct Order {", types_h)
        self.assertIn("std::optional<std::string> note;", types_h)
        self.assertTrue(os.path.exists(os.path.join(self.output_dir, 'nlohmann_serializer.h')))

    def test_main_j2cpp_legacy(self):
        """Test main function with the legacy flag."""
        exit_code, _, stderr = self.run_main(['j2cpp', get_json(), '--out', self.output_dir, '--legacy-cpp'])
        self.assertEqual(exit_code, 0, stderr)
        with open(os.path.join(self.output_dir, 'types.h'), 'r', encoding='utf-8') as f:
            self.assertIn("#include <stdint.h>", f.read())

    def test_main_j2schema_command(self):
        """Test main function with j2schema command."""
        schema_file = os.path.join(self.output_dir, 'person.schema.json')
        exit_code, stdout, stderr = self.run_main(['j2schema', get_json(), '--out', schema_file])
        self.assertEqual(exit_code, 0, stderr)
        self.assertIn(f"Generated: {schema_file}", stdout)
        self.assertTrue(os.path.exists(schema_file))

    def test_main_missing_input(self):
        """Test that a failure prints one error line and exits with 1."""
        missing = os.path.join(self.output_dir, 'missing.json')
        exit_code, stdout, stderr = self.run_main(['j2cpp', missing, '--out', self.output_dir])
        self.assertEqual(exit_code, 1)
        self.assertEqual(stdout, '')
        error_lines = [line for line in stderr.splitlines() if line.startswith('Error:')]
        self.assertEqual(len(error_lines), 1)
        self.assertIn(missing, error_lines[0])

    def test_main_no_match(self):
        """Test merge mode without matching files."""
        pattern = os.path.join(self.output_dir, '*.json')
        exit_code, _, stderr = self.run_main(['j2cpp', pattern, '--merge', '--out', self.output_dir])
        self.assertEqual(exit_code, 1)
        self.assertIn('Error: No files match', stderr)

    def test_commands_reference_functions(self):
        """Test that every command maps to an importable function."""
        for command in load_commands():
            module_name, func_name = command['function']['name'].rsplit('.', 1)
            module = __import__(module_name, fromlist=[func_name])
            self.assertTrue(callable(getattr(module, func_name)))


if __name__ == '__main__':
    unittest.main()
