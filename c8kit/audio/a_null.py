#!/usr/bin/env python3

"""
Null Audio Plugin

Serves as a base class for other Audio plugins.  Can be used on its own if no
sound is required.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class Audio:
    def __init__(self):
        # Buzzer should be disabled (not playing sounds) by default
        self.buzzer_enabled = False

    def update(self, beep_requested):
        # Called at 60Hz.  The buzzer should play sounds while the sound timer is >0
        if beep_requested != self.buzzer_enabled:
            self.enable_buzzer(beep_requested)

        self.buzzer_enabled = beep_requested

    def enable_buzzer(self, enabled):
        pass

    def shutdown(self):
        pass