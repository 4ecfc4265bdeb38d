#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from c8kit.renderers.r_null import Renderer
from c8kit.framebuffer import Framebuffer, FramebufferError


class RecordingRenderer(Renderer):
    def __init__(self):
        super().__init__()
        self.frames = []
        self.titles = []

    def render(self, pixels):
        self.frames.append(bytes(pixels))

    def set_title(self, title):
        self.titles.append(title)


class TestFrameBuffer(unittest.TestCase):
    def setUp(self):
        self.renderer = RecordingRenderer()
        self.framebuffer = Framebuffer(self.renderer, 4, 5)

    def test_framebuffer_resize_vid(self):
        self.assertEqual((4, 5), (self.renderer.width, self.renderer.height))
        self.assertEqual((4, 5), self.framebuffer.get_vid_size())
        self.assertEqual(20, len(self.framebuffer.pixels))

    def test_framebuffer_default_size(self):
        self.assertEqual((64, 32), Framebuffer(Renderer()).get_vid_size())

    def test_framebuffer_bad_size(self):
        self.assertRaises(FramebufferError, Framebuffer, Renderer(), 0, 32)

    def test_framebuffer_writes(self):
        fb = self.framebuffer
        self.assertFalse(fb.xor_pixel(0, 0))
        self.assertEqual("0100000000000000000000000000000000000000", fb.pixels.hex())
        self.assertFalse(fb.xor_pixel(1, 1))
        self.assertEqual("0100000000010000000000000000000000000000", fb.pixels.hex())
        self.assertIsNone(fb.xor_pixel(4, 5))  # Clipped, not wrapped
        self.assertIsNone(fb.xor_pixel(-1, 0))
        self.assertEqual("0100000000010000000000000000000000000000", fb.pixels.hex())

        # Setting an already set pixel erases it, and is a collision
        self.assertTrue(fb.xor_pixel(0, 0))
        self.assertEqual(0, fb.get_pixel(0, 0))
        self.assertEqual(1, fb.get_pixel(1, 1))

        # Check clear works
        fb.clear_screen()
        self.assertEqual("0000000000000000000000000000000000000000", fb.pixels.hex())

    def test_framebuffer_update_only_when_requested(self):
        self.framebuffer.xor_pixel(3, 4)
        self.framebuffer.update(False)
        self.assertEqual([], self.renderer.frames)
        self.framebuffer.update(True)
        self.assertEqual(1, len(self.renderer.frames))
        self.assertEqual(1, self.renderer.frames[0][19])

    def test_framebuffer_report_perf(self):
        self.framebuffer.report_perf(60, 800)
        self.assertEqual("C8Kit - 60 FPS, 800 OPS", self.renderer.titles[-1])
