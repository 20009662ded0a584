from dataclasses import replace
from typing import Optional

from fractals.base import ColorMapperConfig, ReferenceRect, Viewport
from rendering.service import RenderService
from rendering.session import RenderSession
from utils.enums import ColoringMode, EngineMode


class RenderConfigBuilder:
    """
    Builder for configuring render settings.
    """
    def __init__(self, service: RenderService):
        self.service = service
        self._resolution: Optional[str] = None
        self._max_iter: Optional[int] = None
        self._escape_radius_sq: Optional[float] = None
        self._density: Optional[float] = None
        self._saturation: Optional[float] = None
        self._brightness: Optional[float] = None
        self._hue_range: Optional[float] = None
        self._coloring: Optional[ColoringMode] = None
        self._reference: Optional[ReferenceRect] = None
        self._engine_mode: Optional[EngineMode] = None
        self._start_delay: Optional[float] = None

    def resolution(self, preset: str) -> 'RenderConfigBuilder':
        self._resolution = preset
        return self

    def max_iter(self, value: int) -> 'RenderConfigBuilder':
        self._max_iter = value
        return self

    def escape_radius_sq(self, value: float) -> 'RenderConfigBuilder':
        self._escape_radius_sq = value
        return self

    def density(self, value: float) -> 'RenderConfigBuilder':
        self._density = value
        return self

    def saturation(self, value: float) -> 'RenderConfigBuilder':
        self._saturation = value
        return self

    def brightness(self, value: float) -> 'RenderConfigBuilder':
        self._brightness = value
        return self

    def hue_range(self, value: float) -> 'RenderConfigBuilder':
        self._hue_range = value
        return self

    def coloring(self, mode: ColoringMode) -> 'RenderConfigBuilder':
        self._coloring = mode
        return self

    def reference(self, rect: ReferenceRect) -> 'RenderConfigBuilder':
        self._reference = rect
        return self

    def engine_mode(self, mode: EngineMode) -> 'RenderConfigBuilder':
        self._engine_mode = mode
        return self

    def start_delay(self, seconds: float) -> 'RenderConfigBuilder':
        self._start_delay = seconds
        return self

    def build(self) -> ColorMapperConfig:
        """Color config with the builder's overrides applied; validated."""
        overrides = {
            "max_iterations": self._max_iter,
            "escape_radius_sq": self._escape_radius_sq,
            "density": self._density,
            "saturation": self._saturation,
            "brightness": self._brightness,
            "hue_range": self._hue_range,
            "coloring": self._coloring,
        }
        config = replace(self.service.config,
                         **{k: v for k, v in overrides.items() if v is not None})
        config.validate()
        return config

    def apply(self, api: Optional['RenderAPI'] = None):
        # Apply settings to the service; they take effect on the next start
        self.service.set_config(self.build())
        if self._reference is not None:
            self.service.renderer.reference = self._reference
        if self._engine_mode is not None:
            self.service.set_engine_mode(self._engine_mode)
        if api is not None:
            if self._resolution:
                api.viewport = api.viewport.resized(*self._compute_size(self._resolution))
            if self._start_delay is not None:
                api.start_delay = float(self._start_delay)

    @staticmethod
    def _compute_size(preset: str) -> tuple[int, int]:
        mapping = {
            "2160p": 3840,
            "1440p": 2560,
            "1080p": 1920,
            "720p": 1280,
            "480p": 854,
            "360p": 640,
        }
        h = int(preset.replace("p", ""))
        w = mapping.get(preset, 1920)
        return w, h


class RenderAPI:
    """
    Facade for controlling rendering operations and managing callbacks.
    Keeps the current viewport so pan/zoom gestures can be applied as deltas.
    """
    def __init__(self, service: Optional[RenderService] = None,
                 viewport: Optional[Viewport] = None):
        self.service: RenderService = service or RenderService()
        self.viewport: Viewport = viewport or Viewport(width=256, height=256)
        self.start_delay: float = 0.0

    def configure(self) -> RenderConfigBuilder:
        return RenderConfigBuilder(self.service)

    # ---------- Callbacks --------------------------------
    def on_started(self, cb): self.service.on_started = cb
    def on_partial_frame(self, cb): self.service.on_partial_frame = cb
    def on_finished(self, cb): self.service.on_finished = cb
    def on_cancelled(self, cb): self.service.on_cancelled = cb
    def on_log(self, cb): self.service.on_log = cb

    # ----------- Facade methods --------------------------
    def start(self, viewport: Optional[Viewport] = None,
              config: Optional[ColorMapperConfig] = None,
              delay: Optional[float] = None) -> RenderSession:
        """
        Starts rendering the viewport, cancelling any render in progress.

        Args:
            viewport (Viewport): The view to render; defaults to the current one.
            config (ColorMapperConfig): Coloring settings; defaults to the service's.
            delay (float): Seconds to wait before rendering starts.

        Returns:
            RenderSession: Handle of the new render.
        """
        if viewport is not None:
            viewport.validate()
            self.viewport = viewport
        return self.service.start(self.viewport, config,
                                  self.start_delay if delay is None else delay)

    def cancel(self, handle: Optional[RenderSession] = None) -> None:
        """
        Cancels the given render, or the current one. Safe to call at any time.
        """
        self.service.cancel(handle)

    def restart(self, viewport: Optional[Viewport] = None,
                config: Optional[ColorMapperConfig] = None,
                delay: Optional[float] = None) -> RenderSession:
        """
        Cancels the current render and starts a new one.
        """
        self.service.cancel()
        return self.start(viewport, config, delay)

    def pan(self, dx: float, dy: float) -> RenderSession:
        """
        Moves the view by a pixel delta and re-renders.
        """
        return self.restart(self.viewport.translated(dx, dy))

    def zoom(self, factor: float) -> RenderSession:
        """
        Scales the view by `factor` and re-renders.
        """
        return self.restart(self.viewport.scaled(factor))

    def resize(self, width: int, height: int) -> RenderSession:
        """
        Re-renders for new surface dimensions.
        """
        return self.restart(self.viewport.resized(width, height))

    def clear(self) -> None:
        """
        Resets pan and zoom; takes effect on the next start.
        """
        self.viewport = Viewport(width=self.viewport.width, height=self.viewport.height)

    def shutdown(self) -> None:
        self.service.shutdown()
