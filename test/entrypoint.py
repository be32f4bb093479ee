"""
Command-line front end tests (python -m getoptions).

Scope
- Validate serialize() on a parse result.
- Validate main(): JSON output, usage without arguments, exit status 1 on faults.

Conventions
- Test method names follow CamelCase per project convention.
- Console output is captured by patching the module consoles with StringIO-backed ones.
"""

from __future__ import annotations

import io
import json
import os.path
import tempfile
import unittest
from unittest import TestCase
from unittest.mock import patch

from rich.console import Console

from getoptions import Settings, OptionSpec, getopt
from getoptions import __main__ as entrypoint
from getoptions import faults


def capture():
    return Console(file=io.StringIO(), width=200)


class TestSerialize(TestCase):
    """Behavioral tests for serialize()."""

    def testSerialize(self):
        settings = Settings(options=[OptionSpec(short="o", long="output", argument="required")])
        data = entrypoint.serialize(getopt(["-o", "x", "p"], settings))
        option = {
            "option": {
                "name": [],
                "short": ["o"],
                "long": ["output"],
                "argument": "required",
                "description": None,
            },
            "value": "x",
            "index": 0,
            "subindex": 0,
            "sublength": 1,
        }
        parameter = {"position": 0, "value": "p", "index": 2}
        self.assertEqual(data, {
            "sequence": [option, parameter],
            "options": {"o": option, "output": option},
            "parameters": [parameter],
        })

    def testLongOccurrenceHasNoSubindex(self):
        settings = Settings(options=[OptionSpec(long="quiet")])
        data = entrypoint.serialize(getopt(["--quiet"], settings))
        self.assertNotIn("subindex", data["options"]["quiet"])


class TestMain(TestCase):
    """Behavioral tests for main()."""

    def setUp(self):
        directory = tempfile.TemporaryDirectory()
        self.addCleanup(directory.cleanup)
        self.path = os.path.join(directory.name, "settings.json")
        with open(self.path, "w", encoding="utf-8") as file:
            json.dump({"options": [{"short": "v", "long": "verbose"}]}, file)
        self.stdout = capture()
        self.stderr = capture()
        for target, console in ((entrypoint, self.stdout), (faults, self.stderr)):
            patcher = patch.object(target, "console", console)
            patcher.start()
            self.addCleanup(patcher.stop)

    def testPrintsJson(self):
        entrypoint.main([self.path, "-vv", "input"])
        data = json.loads(self.stdout.file.getvalue())
        self.assertEqual(data["options"]["verbose"]["value"], [None, None])
        self.assertEqual(data["parameters"][0]["value"], "input")

    def testUsageWithoutArguments(self):
        with self.assertRaises(SystemExit) as context:
            entrypoint.main([])
        self.assertEqual(context.exception.code, 0)
        self.assertIn("<settings-file>", self.stdout.file.getvalue())

    def testParseFaultExits(self):
        with self.assertRaises(SystemExit) as context:
            entrypoint.main([self.path, "-q"])
        self.assertEqual(context.exception.code, 1)
        self.assertIn("Unrecognized Option", self.stderr.file.getvalue())

    def testUnreadableSettingsExit(self):
        with self.assertRaises(SystemExit) as context:
            entrypoint.main([self.path + ".missing"])
        self.assertEqual(context.exception.code, 1)
        self.assertIn("Malformed Settings", self.stderr.file.getvalue())


if __name__ == "__main__":
    unittest.main()
