#!/usr/bin/env python3

"""
Framebuffer Emulator

Pixels are written here, and are only handed to the actual display (the host
rendering system) at 60Hz, and then only if something was drawn.  Calling the
rendering frameworks for every pixel change would slow things down
substantially, as a busy program can XOR tens of thousands of pixels a second.

Programs for this system cannot write directly into video RAM.  Instead,
sprites are drawn to the screen using an XOR method, one byte per pixel here,
holding either 0 or 1.

Collisions (where a pixel was set, but was unset by an XOR), are reported back
to the caller for every pixel.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import APP_NAME, VID_WIDTH, VID_HEIGHT


class FramebufferError(Exception):
    pass


class Framebuffer():
    def __init__(self, renderer, vid_width=VID_WIDTH, vid_height=VID_HEIGHT):
        if vid_width <= 0 or vid_height <= 0:
            raise FramebufferError("Invalid display size: {}x{}".format(vid_width, vid_height))

        self.renderer = renderer
        self.vid_width = vid_width
        self.vid_height = vid_height
        self.vid_size = vid_width * vid_height
        self.pixels = bytearray(self.vid_size)
        self.renderer.set_resolution(vid_width, vid_height)  # Update screen resolution
        self.report_perf()

    def clear_screen(self):
        self.pixels[:] = bytes(self.vid_size)

    def xor_pixel(self, x, y):
        # Returns flagging any collision, or None if the pixel is off the screen and was clipped
        if x < 0 or y < 0 or x >= self.vid_width or y >= self.vid_height:
            return None

        vram_loc = y * self.vid_width + x
        pixel = self.pixels[vram_loc]
        self.pixels[vram_loc] = pixel ^ 1
        return pixel != 0

    def get_pixel(self, x, y):
        return self.pixels[y * self.vid_width + x]

    def get_vid_size(self):
        return self.vid_width, self.vid_height

    def update(self, draw_requested):
        if draw_requested:
            self.renderer.render(self.pixels)

    def report_perf(self, fps=0, ops=0):
        title = "{} - {} FPS, {} OPS".format(APP_NAME, fps, ops)
        self.renderer.set_title(title)
