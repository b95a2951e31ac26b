from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Protocol

import pygame


class Notifier(Protocol):
    def notify(self, message: str) -> None: ...


class PrintNotifier:
    def notify(self, message: str) -> None:
        print(f"[gazecheck] {message}", flush=True)


class CallbackNotifier:
    def __init__(self, callback: Callable[[str], None]):
        self._callback = callback

    def notify(self, message: str) -> None:
        self._callback(message)


class SoundNotifier:
    """
    Plays a sound once per notification and waits for it to finish.

    The wait makes the notification blocking, like a modal alert.
    """

    def __init__(self, sound_path: str | os.PathLike[str], volume: float = 0.7):
        path = Path(sound_path)
        if not path.exists():
            raise FileNotFoundError(f"notification sound not found: {path}")

        if not pygame.mixer.get_init():
            pygame.mixer.pre_init(44100, -16, 2, 512)
            pygame.mixer.init()

        self._sound = pygame.mixer.Sound(str(path))
        self._sound.set_volume(volume)

    def notify(self, message: str) -> None:
        print(f"[gazecheck] {message}", flush=True)
        channel = self._sound.play(loops=0)
        while channel is not None and channel.get_busy():
            pygame.time.wait(10)

    def close(self) -> None:
        if pygame.mixer.get_init():
            pygame.mixer.quit()
