from __future__ import annotations

import logging
import random
from typing import Optional

from api.render_api import RenderAPI
from fractals.base import WALLPAPER_CONFIG, ColorMapperConfig, Viewport
from rendering.events import FrameEvent
from rendering.service import RenderService
from rendering.session import RenderSession

logger = logging.getLogger(__name__)

# Enough time for the user to admire the wallpaper before the next rendition.
ADMIRE_DELAY = 10.0


def random_viewport(width: int, height: int,
                    rng: Optional[random.Random] = None) -> Viewport:
    """Random pan and zoom around the set, as the live wallpaper picks them."""
    rng = rng or random.Random()
    f = rng.uniform(-0.25, 0.25)
    z = max(0.5, f * 100.0)
    return Viewport(width=width, height=height).translated(f * width, f * height).scaled(z)


class WallpaperDriver:
    """
    Renders an endless series of random views onto one surface.

    After each finished frame a new random viewport is rendered, delayed by
    `admire_delay` seconds. Frames go to `on_frame`.
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        config: ColorMapperConfig = WALLPAPER_CONFIG,
        admire_delay: float = ADMIRE_DELAY,
        rng: Optional[random.Random] = None,
        service: Optional[RenderService] = None,
    ) -> None:
        self.api = RenderAPI(service or RenderService(config=config),
                             Viewport(width=width, height=height))
        self.config = config
        self.admire_delay = float(admire_delay)
        self.rng = rng or random.Random()
        self.frames = 0
        self.on_frame = None
        self._visible = False
        self.api.on_finished(self._on_finished)

    @property
    def service(self) -> RenderService:
        return self.api.service

    def set_size(self, width: int, height: int) -> RenderSession:
        self.api.viewport = self.api.viewport.resized(width, height)
        return self.randomise()

    def randomise(self, delay: float = 0.0) -> RenderSession:
        vp = self.api.viewport
        viewport = random_viewport(vp.width, vp.height, self.rng)
        logger.debug("Next wallpaper view: %s", viewport)
        return self.api.restart(viewport, self.config, delay)

    def set_visible(self, visible: bool) -> None:
        self._visible = visible
        if visible:
            if not self.service.is_rendering:
                self.api.start(config=self.config)
        else:
            self.api.cancel()

    def stop(self) -> None:
        self._visible = False
        self.api.shutdown()

    def _on_finished(self, evt: FrameEvent) -> None:
        self.frames += 1
        if self.on_frame is not None:
            self.on_frame(evt)
        if self._visible:
            self.randomise(self.admire_delay)
