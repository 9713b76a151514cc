# tests/conftest.py
import io
import sys
import json
import pytest
from unittest.mock import patch

from combinator.cli import main


@pytest.fixture
def run_cli(monkeypatch, capsys):
    """
    Runs the CLI entry point with a JSON request on stdin.
    Returns (exit_code, stdout, stderr).
    """
    def _run(request, *args):
        blob = request if isinstance(request, str) else json.dumps(request)
        monkeypatch.setattr(sys, "stdin", io.StringIO(blob))
        code = 0
        with patch.object(sys, "argv", ["the-great-combinator", *args]):
            try:
                main()
            except SystemExit as e:
                code = e.code
        out, err = capsys.readouterr()
        return code, out, err

    return _run
