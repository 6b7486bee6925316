import io

import numpy as np
import pytest

from alefifo.actions import ACTION_CODES, PLAYER_A_ACTIONS, PLAYER_B_NOOP, SYSTEM_RESET, action_code
from alefifo.env import ALEEnv, ALEProcess, EnvConfig, build_command
from alefifo.errors import MalformedHandshake
from alefifo.types import Outcome, PoolingMethod


class FakeProcess:
    """Stands in for ALEProcess with scripted simulator output."""

    def __init__(self, lines):
        self.reader = io.StringIO("".join(f"{line}\n" for line in lines))
        self.writer = io.StringIO()
        self.started = False
        self.closed = False

    def start(self) -> None:
        self.started = True

    def close(self) -> None:
        self.closed = True


def _config(**kwargs) -> EnvConfig:
    base = dict(ale_path="ale", rom_path="pong.bin", wants_screen=False, wants_ram=False, wants_signal=True)
    base.update(kwargs)
    return EnvConfig(**base)


def test_action_registry() -> None:
    assert len(PLAYER_A_ACTIONS) == 18
    assert action_code("player_a_noop") == 0
    assert action_code("PLAYER_A_FIRE") == 1
    assert action_code("player_a_downleftfire") == 17
    assert PLAYER_B_NOOP == 18
    assert ACTION_CODES["player_b_downleftfire"] == 35
    assert SYSTEM_RESET == 45
    with pytest.raises(KeyError):
        action_code("jump")


def test_build_command_flags() -> None:
    command = build_command("/opt/ale", "roms/pong.bin", record_screen_dir="frames", extra_args=["-display_screen", "false"])
    assert command[0] == "/opt/ale"
    assert command[-1] == "roms/pong.bin"
    assert command[command.index("-game_controller") + 1] == "fifo"
    assert command[command.index("-frame_skip") + 1] == "0"
    assert command[command.index("-repeat_action_probability") + 1] == "0"
    assert command[command.index("-disable_color_averaging") + 1] == "true"
    assert command[command.index("-record_screen_dir") + 1] == "frames"
    assert "-display_screen" in command


def test_build_command_without_recording() -> None:
    assert "-record_screen_dir" not in build_command("ale", "rom.bin")


def test_process_error_path_uses_working_dir(tmp_path) -> None:
    process = ALEProcess("ale", "rom.bin", working_dir=str(tmp_path))
    assert process.error_path == tmp_path / "ale_err.txt"
    with pytest.raises(RuntimeError):
        process.reader


def test_env_steps_and_resolves_names() -> None:
    process = FakeProcess(["2-1", "0,0:", "0,3,2:", "0,0:", "0,0:"])
    env = ALEEnv(_config(), process=process)
    assert process.started
    assert (env.dimensions.width, env.dimensions.height) == (2, 1)
    obs, outcome = env.step("player_a_fire")
    assert outcome is Outcome.CONTINUE
    assert obs.signal.reward == 3
    assert obs.signal.lives == 2
    assert obs.screen.shape == (1, 2, 3)
    obs, outcome = env.reset()
    assert outcome is Outcome.CONTINUE
    assert process.writer.getvalue().splitlines() == ["0,0,1,1", "1,18", "45,18", "45,18"]
    env.close()
    assert process.closed


def test_env_frame_skip_and_pooling_config() -> None:
    process = FakeProcess(["2-1", "0,0:"])
    env = ALEEnv(_config(frame_skip=4, pooling=PoolingMethod.MEAN), process=process)
    assert env.frame_skip == 4
    assert env.session.pooling is PoolingMethod.MEAN


def test_env_closes_process_on_bad_handshake() -> None:
    process = FakeProcess(["garbage"])
    with pytest.raises(MalformedHandshake):
        ALEEnv(_config(), process=process)
    assert process.closed


def test_env_observation_shapes_with_screen() -> None:
    process = FakeProcess(["2-1", "", "0E02:"])
    env = ALEEnv(_config(wants_screen=True, wants_signal=False), process=process)
    obs, _ = env.step(0)
    assert obs.screen.dtype == np.uint8
    assert np.all(obs.screen == 0xEC)
    assert env.wants_terminate() is False
