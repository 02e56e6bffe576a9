"""
Rebinding of aesthetics when a new scale is started

Every reference to an aesthetic found so far in a plot (global mapping, layers,
scales, guides and labels) is renamed to a suffixed alias, so that layers and
scales added afterwards bind to the bare aesthetic without touching the old ones.
"""

import logging
from copy import copy, deepcopy
from typing import Dict, List, Optional, Any

from plotnine import aes, guide_colorbar, guide_legend
from plotnine.exceptions import PlotnineError

from aes_names import (
    bump_name,
    bump_renames,
    matching_names,
    rename,
    rename_columns,
)
from newscale_config import get_config

logger = logging.getLogger(__name__)

# Aesthetic declarations carried by geoms and stats
AES_DECLARATIONS = ('DEFAULT_AES', 'REQUIRED_AES', 'NON_MISSING_AES')

# Geom entry points that receive data with renamed columns
GEOM_TRANSLATED = ('handle_na', 'draw_legend', 'legend_key_size')

# Stat entry points that must see canonical names but hand back renamed ones
STAT_TRANSLATED = ('setup_data', 'compute_layer')

NO_GUIDE = (None, False, 'none')

# Guides a scale may name instead of passing a guide object
GUIDES = {
    'legend': guide_legend,
    'colorbar': guide_colorbar,
    'colourbar': guide_colorbar,
}


class ColumnTranslator:
    """
    Wraps a geom or stat method so it sees canonical aesthetic column names

    Args:
        method: Callable to delegate to
        to_canonical: Renamed column -> canonical column, e.g. {"color_new": "color"}
        restore: Rename canonical columns back in the result
    """

    def __init__(self, method, to_canonical: Dict[str, str], restore: bool = False):
        self.method = method
        self.to_canonical = dict(to_canonical)
        self.restore = restore

    def __call__(self, data, *args, **kwargs):
        result = self.method(rename_columns(data, self.to_canonical), *args, **kwargs)
        if self.restore:
            from_canonical = {v: k for k, v in self.to_canonical.items()}
            result = rename_columns(result, from_canonical)
        return result

    def __repr__(self):
        return f"ColumnTranslator({self.method!r}, {self.to_canonical!r}, restore={self.restore})"


def unwrap(method):
    """Original callable behind a (possibly) translated method"""
    while isinstance(method, ColumnTranslator):
        method = method.method
    return method


def _rename_declarations(obj, renames: Dict[str, str]) -> None:
    # Instance attributes shadow the class declarations, which stay untouched
    for attr in AES_DECLARATIONS:
        value = getattr(obj, attr, None)
        if value is not None:
            setattr(obj, attr, rename(value, renames))


def clone_geom(old_geom, renames: Dict[str, str], to_canonical: Dict[str, str]):
    """
    Copy of a geom that declares the renamed aesthetics

    Drawing still happens with canonical names: data reaching handle_na and the
    legend methods is translated back before calling the original geom.
    """
    new_geom = copy(old_geom)
    _rename_declarations(new_geom, renames)

    aes_params = getattr(new_geom, 'aes_params', None)
    if aes_params is not None:
        new_geom.aes_params = rename(aes_params, renames)

    for name in GEOM_TRANSLATED:
        if hasattr(old_geom, name):
            method = unwrap(getattr(old_geom, name))
            setattr(new_geom, name, ColumnTranslator(method, to_canonical))

    return new_geom


def clone_stat(old_stat, renames: Dict[str, str], to_canonical: Dict[str, str]):
    """
    Copy of a stat that declares the renamed aesthetics

    The stat computes with canonical names; its output is renamed again so the
    rebound scales still find their columns.
    """
    new_stat = copy(old_stat)
    _rename_declarations(new_stat, renames)

    for name in STAT_TRANSLATED:
        # Drop a translator from an earlier rebind so the method resolves
        # to the class implementation, bound to the new stat
        vars(new_stat).pop(name, None)
        if hasattr(new_stat, name):
            method = getattr(new_stat, name)
            setattr(new_stat, name, ColumnTranslator(method, to_canonical, restore=True))

    return new_stat


def layer_aesthetics(layer, aesthetic: str, suffix: str) -> List[str]:
    """
    Names under which a layer uses an aesthetic

    The explicit mapping wins, then the stat defaults, then the geom defaults.
    """
    old_aes = matching_names(getattr(layer, 'mapping', None) or {}, aesthetic, suffix)
    if not old_aes:
        old_aes = matching_names(getattr(layer.stat, 'DEFAULT_AES', None) or {}, aesthetic, suffix)
    if not old_aes:
        old_aes = matching_names(getattr(layer.geom, 'DEFAULT_AES', None) or {}, aesthetic, suffix)
    return old_aes


def bump_aes_layer(layer, aesthetic: str, suffix: Optional[str] = None):
    """
    Rename an aesthetic in one layer

    Args:
        layer: plotnine layer
        aesthetic: Logical aesthetic being rebound, e.g. "color"
        suffix: Rebind suffix, from the active configuration when None

    Returns:
        The same layer when it does not use the aesthetic, otherwise a copy
        with cloned geom and stat
    """
    if suffix is None:
        suffix = get_config()['rebind_suffix']

    old_aes = layer_aesthetics(layer, aesthetic, suffix)
    if not old_aes:
        logger.debug(f"{type(layer.geom).__name__} layer does not use {aesthetic}")
        return layer

    renames = {ae: bump_name(ae, suffix) for ae in old_aes}
    to_canonical = {new: aesthetic for new in renames.values()}

    old_stat = layer.stat
    new_layer = copy(layer)
    new_layer.geom = clone_geom(layer.geom, renames, to_canonical)
    new_layer.stat = clone_stat(old_stat, renames, to_canonical)

    # Make implicit mapping explicit. Without it a stat-computed default
    # is lost once a second extra scale is added for the same aesthetic.
    mapping = copy(layer.mapping) if layer.mapping is not None else aes()
    stat_defaults = getattr(old_stat, 'DEFAULT_AES', None) or {}
    for ae in old_aes:
        if ae not in mapping and stat_defaults.get(ae) is not None:
            mapping[ae] = stat_defaults[ae]

    new_layer.mapping = rename(mapping, renames)
    if hasattr(new_layer.geom, 'mapping'):
        new_layer.geom.mapping = new_layer.mapping

    logger.debug(f"{type(layer.geom).__name__} layer: {renames}")
    return new_layer


def bump_aes_layers(layers, aesthetic: str, suffix: Optional[str] = None):
    return type(layers)(bump_aes_layer(l, aesthetic, suffix) for l in layers)


def make_guide(name: str):
    """Guide object for a guide given by name, e.g. "legend" -> guide_legend()"""
    try:
        klass = GUIDES[name]
    except KeyError:
        raise PlotnineError(f"Unknown guide: {name!r}")
    return klass()


def bump_aes_guide(guide, renames: Dict[str, str]):
    """
    Clone of a scale's guide that accepts the renamed aesthetics

    Disabled guides are returned as they are.
    """
    if guide is None or guide is False or (isinstance(guide, str) and guide in NO_GUIDE):
        return guide
    if isinstance(guide, str):
        guide = make_guide(guide)

    new_guide = copy(guide)

    available = getattr(new_guide, 'available_aes', None)
    if available is not None:
        new_guide.available_aes = rename(available, renames)

    override = getattr(new_guide, 'override_aes', None)
    if override:
        new_guide.override_aes = rename(override, renames)

    return new_guide


def bump_aes_scale(scale, aesthetic: str, suffix: Optional[str] = None,
                   titles: Optional[Dict[str, str]] = None):
    """
    Rename an aesthetic in one scale and its guide

    Args:
        scale: plotnine scale
        aesthetic: Logical aesthetic being rebound
        suffix: Rebind suffix, from the active configuration when None
        titles: Legend title for each aesthetic name, given to a scale
            without a name of its own

    Returns:
        The same scale when unrelated, otherwise a renamed copy
    """
    if suffix is None:
        suffix = get_config()['rebind_suffix']

    renames = bump_renames(scale.aesthetics, aesthetic, suffix)
    if not renames:
        return scale

    new_scale = copy(scale)
    new_scale.aesthetics = rename(scale.aesthetics, renames)
    new_scale.guide = bump_aes_guide(scale.guide, renames)

    # plotnine has no label for a renamed aesthetic, the title goes on the scale
    if getattr(new_scale, 'name', None) is None and titles:
        for ae in renames:
            if titles.get(ae):
                new_scale.name = titles[ae]
                break

    logger.debug(f"{type(scale).__name__}: {list(scale.aesthetics)} -> {list(new_scale.aesthetics)}")
    return new_scale


def bump_aes_scales(scales, aesthetic: str, suffix: Optional[str] = None,
                    titles: Optional[Dict[str, str]] = None):
    return type(scales)(bump_aes_scale(sc, aesthetic, suffix, titles) for sc in scales)


def _names(container) -> List[str]:
    if container is None:
        return []
    if hasattr(container, 'keys'):
        return list(container.keys())
    if hasattr(container, '__dict__'):
        return list(vars(container))
    return []


def _lookup(container, name: str):
    if hasattr(container, 'get'):
        return container.get(name)
    return getattr(container, name, None)


def label_text(value) -> Optional[str]:
    """
    Default legend title for a mapping value

    A column name is its own title. after_stat('level') and other staged
    mappings are titled by the expression they were given.
    """
    if isinstance(value, str):
        return value
    for attr in ('start', 'after_stat', 'after_scale'):
        expr = getattr(value, attr, None)
        if isinstance(expr, str):
            return expr
    return None


def scope_titles(plot, aesthetic: str, suffix: Optional[str] = None) -> Dict[str, str]:
    """
    Legend titles of the aesthetic's scopes, before they are renamed

    Explicit labels come first, then the plot mapping, then each layer's
    mapping and its stat-computed default, in layer order.

    Args:
        plot: ggplot being rebound
        aesthetic: Logical aesthetic
        suffix: Rebind suffix, from the active configuration when None

    Returns:
        Aesthetic name -> title, e.g. {"color": "site", "color_new": "Site"}
    """
    if suffix is None:
        suffix = get_config()['rebind_suffix']

    sources = [plot.labels, plot.mapping]
    for lyr in plot.layers:
        sources.append(getattr(lyr, 'mapping', None))
        stat_defaults = getattr(lyr.stat, 'DEFAULT_AES', None) or {}
        # Plain stat defaults are constants, not titles
        sources.append({ae: v for ae, v in stat_defaults.items() if not isinstance(v, str)})

    titles: Dict[str, str] = {}
    for source in sources:
        for ae in matching_names(_names(source), aesthetic, suffix):
            if ae not in titles:
                title = label_text(_lookup(source, ae))
                if title:
                    titles[ae] = title
    return titles


def bump_aes_guides(guides, aesthetic: str, suffix: Optional[str] = None):
    """Rename guides requested with `+ guides(...)`"""
    if suffix is None:
        suffix = get_config()['rebind_suffix']
    return rename(guides, bump_renames(_names(guides), aesthetic, suffix))


def bump_aes_labels(labels, aesthetic: str, suffix: Optional[str] = None):
    if suffix is None:
        suffix = get_config()['rebind_suffix']
    return rename(labels, bump_renames(_names(labels), aesthetic, suffix))


def has_scale(scales, aesthetic: str) -> bool:
    return any(aesthetic in sc.aesthetics for sc in scales)


def materialize_default_scales(plot, aesthetic: str):
    """
    Add the default scales plotnine would create for an aesthetic

    The plot is built on a copy because the aesthetic may only be known
    after statistics are computed (e.g. after_stat mappings).
    """
    built = deepcopy(plot)
    try:
        built._build()
    except Exception as e:
        logger.error(f"Could not build plot to create default {aesthetic} scales: {e}")
        raise

    for sc in built.scales:
        if aesthetic in sc.aesthetics and not has_scale(plot.scales, aesthetic):
            logger.debug(f"Adding default scale {type(sc).__name__} for {aesthetic}")
            plot.scales.append(sc)

    return plot


def rebind(plot, aesthetic: str, config: Optional[Dict[str, Any]] = None):
    """
    Start a new scale scope for an aesthetic

    Args:
        plot: ggplot being built. Modified and returned
        aesthetic: Canonical aesthetic name, e.g. "color" or "fill"
        config: Configuration dictionary, the active one when None

    Returns:
        The plot, with every reference to the aesthetic renamed
    """
    conf = config if config is not None else get_config()
    suffix = conf['rebind_suffix']

    logger.info(f"Starting new {aesthetic} scale")

    if conf.get('materialize_default_scales', True) and not has_scale(plot.scales, aesthetic):
        materialize_default_scales(plot, aesthetic)

    titles = scope_titles(plot, aesthetic, suffix)

    plot.mapping = rename(plot.mapping, bump_renames(_names(plot.mapping), aesthetic, suffix))
    plot.layers = bump_aes_layers(plot.layers, aesthetic, suffix)
    plot.scales = bump_aes_scales(plot.scales, aesthetic, suffix, titles)
    plot.guides = bump_aes_guides(plot.guides, aesthetic, suffix)
    plot.labels = bump_aes_labels(plot.labels, aesthetic, suffix)

    scopes = [ae for sc in plot.scales for ae in matching_names(sc.aesthetics, aesthetic, suffix)]
    logger.info(f"New {aesthetic} scale started, earlier scales now use {scopes}")
    return plot
