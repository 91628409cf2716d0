"""
Best-effort alert side channels: the alert sound and desktop notifications

Neither function raises, the agenda keeps working without a sound server or
a notification daemon.
"""
import logging
import shutil
import subprocess
from pathlib import Path

SOUND_FILE = Path(__file__).parent / 'beep.wav'
SOUND_PLAYERS = ('paplay', 'aplay', 'afplay')
APP_NAME = 'ics-agenda'

# player of the last alert sound, reaped before the next one starts
_player: subprocess.Popen | None = None


def play_sound(sound_file: Path = SOUND_FILE) -> bool:
    """Start playing `sound_file` without waiting for it to finish.

    Nothing is started while the previous sound is still playing.
    """
    global _player
    if _player is not None and _player.poll() is None:
        logging.debug("Alert sound is still playing, skipped.")
        return True
    _player = None

    for player in SOUND_PLAYERS:
        executable = shutil.which(player)
        if executable is None:
            continue
        args = [executable, str(sound_file)]
        if player == 'aplay':
            args.insert(1, '--quiet')
        try:
            _player = subprocess.Popen(args, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
        except OSError as e:
            logging.warning(f"Failed to play alert sound with {player}: {e}")
            return False
        return True

    logging.debug("No sound player found, alert sound skipped.")
    return False


def send_notification(title: str, body: str, timeout: float = 5) -> bool:
    """Send a desktop notification through `notify-send`.

    Returns:
        True if the notification was delivered to the notification daemon
    """
    executable = shutil.which('notify-send')
    if executable is None:
        logging.warning("notify-send not found, notification skipped.")
        return False

    try:
        subprocess.run(
            [executable, f'--app-name={APP_NAME}', title, body],
            check=True,
            capture_output=True,
            timeout=timeout,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logging.warning(f"Failed to send notification: {e}")
        return False
    return True
