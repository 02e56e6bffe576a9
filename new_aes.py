# -*- coding: utf-8 -*-
"""
New Scales for plotnine

Allows adding multiple color/fill scales to the same plot, the way the
ggnewscale R package does for ggplot2:
https://github.com/eliocamp/ggnewscale

Example:
    (ggplot(mapping=aes('x', 'y'))
     + geom_contour(topography, aes(z='z', color=after_stat('level')))
     + scale_color_cmap('viridis')
     # geoms below will use another color scale
     + new_scale_color()
     + geom_point(measurements, aes(color='thing'), size=3)
     + scale_color_cmap('magma'))
"""

import logging
from typing import Optional, Dict, Any

from plotnine import ggplot
from plotnine.exceptions import PlotnineError
from plotnine.mapping.aes import rename_aesthetics

from bump_aes import rebind

logger = logging.getLogger(__name__)


class NewScale:
    """
    Marker that starts a new scale for an aesthetic when added to a ggplot

    Layers and scales added after it bind to a fresh scale, the ones added
    before keep theirs.
    """

    def __init__(self, aesthetic: str, config: Optional[Dict[str, Any]] = None):
        """
        Args:
            aesthetic: The aesthetic to create new scale for ('color', 'fill', etc.)
            config: Configuration used when rebinding, the active one when None
        """
        if not isinstance(aesthetic, str) or not aesthetic.strip():
            raise ValueError(f"Aesthetic must be a non-empty string, got {aesthetic!r}")
        self.aesthetic = self._standardize_aes_name(aesthetic.strip())
        self.config = config

    @staticmethod
    def _standardize_aes_name(aesthetic: str) -> str:
        # plotnine spells it 'color'
        return rename_aesthetics([aesthetic])[0]

    def __radd__(self, plot: ggplot) -> ggplot:
        if not isinstance(plot, ggplot):
            raise PlotnineError(
                f"Cannot add a new {self.aesthetic} scale to object of type {type(plot)!r}")
        logger.debug(f"Adding {self!r} to plot")
        return rebind(plot, self.aesthetic, self.config)

    def __eq__(self, other):
        if not isinstance(other, NewScale):
            return NotImplemented
        return self.aesthetic == other.aesthetic

    def __hash__(self):
        return hash((type(self).__name__, self.aesthetic))

    def __repr__(self):
        return f"new_scale({self.aesthetic!r})"


def new_scale(aesthetic: str) -> NewScale:
    """
    Create a new scale for the specified aesthetic

    Args:
        aesthetic: Aesthetic name ('color', 'fill', etc.)

    Returns:
        NewScale object
    """
    return NewScale(aesthetic)


def new_scale_color() -> NewScale:
    """
    Convenient function to create new color scale

    Returns:
        NewScale object for color aesthetic
    """
    return new_scale("color")


def new_scale_colour() -> NewScale:
    """British spelling alias for new_scale_color"""
    return new_scale("colour")


def new_scale_fill() -> NewScale:
    """
    Convenient function to create new fill scale

    Returns:
        NewScale object for fill aesthetic
    """
    return new_scale("fill")


__all__ = [
    'NewScale', 'new_scale', 'new_scale_color', 'new_scale_colour',
    'new_scale_fill',
]
