#!/usr/bin/env python3

"""
Curses Renderer Plugin

Used by a Framebuffer object to draw the screen.  This draws graphics in a
standard Linux-style TTY Terminal, the Windows Command Prompt, or PowerShell.

Each set pixel of the screen is drawn as inverted spaces, stretched
horizontally by the scale so pixels look roughly square.  The top line of the
terminal is kept for the title.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import curses
import _curses
from .r_null import Renderer as RendererBase


class Renderer(RendererBase):
    def __init__(self, scale=None, **kwargs):
        if scale is None:
            scale = 2  # Default horizontal stretch if not supplied, or set to default

        self.pixel_char = " " * scale
        self.pad = None
        self.last_screen_height = -1
        self.last_screen_width = -1
        self.screen = curses.initscr()
        curses.curs_set(0)
        curses.noecho()
        curses.cbreak()

        super().__init__(scale)

    def set_resolution(self, width, height):
        adjusted_width = width * self.scale + 1

        # We have to allow one extra character, presumably for the cursor, otherwise we can't write the furthest
        # bottom-right pixel.
        self.pad = curses.newpad(height + 2, adjusted_width)

        super().set_resolution(width, height)

    def render(self, pixels):
        width = self.width
        pixel_char = self.pixel_char

        for location, pixel in enumerate(pixels):
            y, x = divmod(location, width)
            self.pad.addstr(y + 1, x * self.scale, pixel_char, curses.A_REVERSE if pixel else curses.A_NORMAL)

        self.refresh_display()

    def refresh_display(self):
        screen_height, screen_width = self.screen.getmaxyx()  # This doesn't seem to ever change/work on Windows?!

        if screen_height != self.last_screen_height or screen_width != self.last_screen_width:
            # Screen resolution changed, redraw everything
            self.screen.clear()

            if hasattr(curses, "resizeterm"):
                # This doesn't work on Windows
                curses.resizeterm(screen_height, screen_width)

            self.screen.refresh()
            self.last_screen_height = screen_height
            self.last_screen_width = screen_width

        self.pad.refresh(0, 0, 0, 0, screen_height - 1, screen_width - 1)

    def set_title(self, title):
        if self.pad:
            title_len = len(title)
            line_len = self.width * self.scale

            if line_len > title_len:
                self.pad.addstr(0, 0, title + " " * (line_len - title_len), curses.A_REVERSE)

        super().set_title(title)

    def shutdown(self):
        curses.nocbreak()
        curses.echo()

        try:
            curses.curs_set(1)
        except _curses.error:
            pass

        curses.endwin()
        super().shutdown()

    # No Superclass for this Curses-specific method

    def get_curses_screen(self):
        return self.screen
