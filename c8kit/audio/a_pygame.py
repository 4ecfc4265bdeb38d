#!/usr/bin/env python3

"""
PyGame Audio Plugin

Allows the buzzer to play within PyGame / SDL.

The buzzer is very basic.  There is simply an 'on' or 'off' status, so a short
1-bit square wave is built once, and looped for as long as the buzzer is on.

The 1-bit waveform has to effectively be stretched lengthways and have its
offset moved to fit in a modern 8-bit PyGame / SDL buffer, but it will retain
the shape of a square wave.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .a_null import Audio as AudioBase

PLAYBACK_FREQUENCY = 44100.0
DEFAULT_VOLUME = 0.1
BUZZER_BIT_RATE = 4000.0
BUZZER_WAVEFORM = bytes([0xF0] * 16)  # 1-bit samples, 8 per cycle, so a 500Hz tone at the above bit rate


class Audio(AudioBase):
    def __init__(self):
        pygame.mixer.pre_init(int(PLAYBACK_FREQUENCY), size=8, channels=1, buffer=1, allowedchanges=0)
        pygame.mixer.init()
        self.sound = pygame.mixer.Sound(self.resample(BUZZER_WAVEFORM, PLAYBACK_FREQUENCY / BUZZER_BIT_RATE))
        self.sound.set_volume(DEFAULT_VOLUME)
        super().__init__()

    def resample(self, buffer, sample_multiplier):
        # Stretch the width and height of the 1-bit square waveform to fit the host buffer
        resampled_buffer_size = int(len(buffer) * 8 * sample_multiplier)
        resampled_buffer = memoryview(bytearray(resampled_buffer_size))

        for resampled_buffer_pos in range(resampled_buffer_size):
            buffer_bit_pos = resampled_buffer_pos / sample_multiplier
            byte = int(buffer_bit_pos / 8.0)
            bit = 7 - int(buffer_bit_pos % 8.0)
            resampled_buffer[resampled_buffer_pos] = ((buffer[byte] >> bit) & 1) * 0xFF

        return resampled_buffer

    def enable_buzzer(self, enabled):
        # Play or stop the looped sample
        if enabled:
            self.sound.play(-1)
        else:
            self.sound.stop()

    def shutdown(self):
        self.sound.stop()
        pygame.mixer.quit()
        super().shutdown()