"""Tests for command line parsing."""

import pytest

from snake_royale.config import OBSTACLE_RATIO
from snake_royale.main import build_parser
from snake_royale.simulation.state import Modifier


class TestParser:
    def test_defaults_need_no_flags(self):
        args = build_parser().parse_args([])
        assert args.players == 2
        assert args.mods == Modifier.NONE
        assert args.obstacles == OBSTACLE_RATIO
        assert args.seed is None

    def test_mods_and_obstacles(self):
        args = build_parser().parse_args(["--mods", "portals,fast", "--obstacles", "0.12"])
        assert args.mods == Modifier.PORTALS | Modifier.FAST
        assert args.obstacles == pytest.approx(0.12)

    @pytest.mark.parametrize("argv", [
        ["--mods", "LAVA"],
        ["--obstacles", "1.5"],
        ["--obstacles", "-0.1"],
        ["--obstacles", "lots"],
    ])
    def test_bad_values_rejected(self, argv):
        with pytest.raises(SystemExit):
            build_parser().parse_args(argv)
