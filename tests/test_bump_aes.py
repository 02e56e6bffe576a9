import pandas as pd
import pytest
from plotnine import (
    aes,
    after_stat,
    geom_line,
    geom_point,
    ggplot,
    guide_colorbar,
    guide_legend,
    labs,
    scale_color_gradient,
    scale_color_manual,
    scale_fill_gradient,
    stat_identity,
)
from plotnine.exceptions import PlotnineError

from bump_aes import (
    ColumnTranslator,
    bump_aes_guides,
    bump_aes_labels,
    bump_aes_layer,
    bump_aes_layers,
    bump_aes_scale,
    clone_geom,
    clone_stat,
    label_text,
    make_guide,
    scope_titles,
    unwrap,
)


class stat_spy(stat_identity):
    seen = []

    def setup_data(self, data):
        stat_spy.seen.append(sorted(data.columns))
        return data


class stat_colored(stat_identity):
    DEFAULT_AES = {"color": after_stat("y")}


def first_layer(points, *components):
    p = ggplot(points, aes('x', 'y'))
    for c in components:
        p += c
    return p.layers[0]


def test_explicit_mapping_is_renamed(points):
    layer = first_layer(points, geom_point(aes(color='site')))
    new = bump_aes_layer(layer, 'color')

    assert list(new.mapping) == ['color_new']
    assert new.mapping['color_new'] == 'site'
    assert 'color_new' in new.geom.DEFAULT_AES
    assert 'color' not in new.geom.DEFAULT_AES
    assert new.geom is not layer.geom
    assert new.stat is not layer.stat


def test_prototype_is_not_mutated(points):
    layer = first_layer(points, geom_point(aes(color='site')))
    bump_aes_layer(layer, 'color')

    assert 'color' in geom_point.DEFAULT_AES
    assert 'color_new' not in geom_point.DEFAULT_AES
    assert 'color' in layer.geom.DEFAULT_AES
    assert list(layer.mapping) == ['color']


def test_unrelated_layer_is_returned_unchanged(points):
    layer = first_layer(points, geom_point(aes(color='site')))
    new = bump_aes_layer(layer, 'linetype')

    assert new is layer
    assert new.geom is layer.geom
    assert new.stat is layer.stat


def test_default_only_aesthetic_renames_geom(points):
    layer = first_layer(points, geom_point())
    new = bump_aes_layer(layer, 'color')

    assert 'color_new' in new.geom.DEFAULT_AES
    assert 'color_new' not in new.mapping
    assert 'color' not in new.mapping


def test_implicit_stat_mapping_becomes_explicit(points):
    layer = first_layer(points, geom_point(stat=stat_colored()))
    new = bump_aes_layer(layer, 'color')

    assert new.mapping['color_new'] is stat_colored.DEFAULT_AES['color']
    assert 'color_new' in new.stat.DEFAULT_AES
    assert "color" in stat_colored.DEFAULT_AES
    assert "color_new" not in stat_colored.DEFAULT_AES


def test_fixed_parameter_is_renamed(points):
    layer = first_layer(points, geom_point(color='red'))
    new = bump_aes_layer(layer, 'color')

    assert new.geom.aes_params.get('color_new') == 'red'
    assert 'color' not in new.geom.aes_params
    assert layer.geom.aes_params.get('color') == 'red'


def test_geom_handle_na_sees_canonical_names(points):
    layer = first_layer(points, geom_point(aes(color='site')))
    new = bump_aes_layer(layer, 'color')

    data = pd.DataFrame({'x': [1.0, 2.0], 'y': [1.0, 2.0], 'color_new': ['red', 'blue']})
    result = new.geom.handle_na(data)

    assert 'color' in result.columns
    assert 'color_new' not in result.columns
    assert list(result['color']) == ['red', 'blue']


def test_stat_setup_data_round_trips_names():
    stat_spy.seen.clear()
    new_stat = clone_stat(stat_spy(), {'color': 'color_new'}, {'color_new': 'color'})

    data = pd.DataFrame({'x': [1], 'color_new': ['red']})
    result = new_stat.setup_data(data)

    assert stat_spy.seen == [['color', 'x']]
    assert list(result.columns) == ['x', 'color_new']


def test_repeated_bump_does_not_stack_translators():
    stat_spy.seen.clear()
    once = clone_stat(stat_spy(), {'color': 'color_new'}, {'color_new': 'color'})
    twice = clone_stat(once, {'color_new': 'color_new_new'}, {'color_new_new': 'color'})

    data = pd.DataFrame({'color_new_new': ['red']})
    result = twice.setup_data(data)

    assert stat_spy.seen == [['color']]
    assert list(result.columns) == ['color_new_new']
    assert not isinstance(twice.setup_data.method, ColumnTranslator)


def test_geom_translators_unwrap_to_original(points):
    layer = first_layer(points, geom_point(aes(color='site')))
    once = clone_geom(layer.geom, {'color': 'color_new'}, {'color_new': 'color'})
    twice = clone_geom(once, {'color_new': 'color_new_new'}, {'color_new_new': 'color'})

    assert isinstance(twice.handle_na, ColumnTranslator)
    assert unwrap(twice.handle_na) == unwrap(once.handle_na)
    assert 'color_new_new' in twice.DEFAULT_AES


def test_bump_layers_keeps_container_type(points):
    p = ggplot(points, aes('x', 'y')) + geom_point(aes(color='site')) + geom_line(aes(linetype='kind'))
    layers = bump_aes_layers(p.layers, 'linetype')

    assert type(layers) is type(p.layers)
    assert layers[0] is p.layers[0]
    assert list(layers[1].mapping) == ['linetype_new']


def test_scale_aesthetics_and_colorbar_guide():
    scale = scale_color_gradient()
    new = bump_aes_scale(scale, 'color')

    assert new.aesthetics == ['color_new']
    assert scale.aesthetics == ['color']
    assert isinstance(new.guide, guide_colorbar)
    assert 'color_new' in new.guide.available_aes


def test_disabled_guide_is_kept():
    new = bump_aes_scale(scale_color_gradient(guide=None), 'color')
    assert new.aesthetics == ['color_new']
    assert new.guide is None


def test_unrelated_scale_is_unchanged():
    scale = scale_fill_gradient()
    assert bump_aes_scale(scale, 'color') is scale


def test_legend_override_aes_is_renamed():
    guide = guide_legend(override_aes={'color': 'red', 'size': 3})
    scale = scale_color_manual(values=['red', 'blue'], guide=guide)
    new = bump_aes_scale(scale, 'color')

    assert new.guide is not guide
    assert new.guide.override_aes == {'color_new': 'red', 'size': 3}
    assert guide.override_aes == {'color': 'red', 'size': 3}


def test_scale_bumped_twice():
    new = bump_aes_scale(bump_aes_scale(scale_color_gradient(), 'color'), 'color')
    assert new.aesthetics == ['color_new_new']


def test_guides_mapping_is_renamed():
    guides = {'color': 'legend', 'color_new': 'colorbar', 'fill': 'legend'}
    result = bump_aes_guides(guides, 'color')
    assert result == {'color_new': 'legend', 'color_new_new': 'colorbar', 'fill': 'legend'}


def test_labels_mapping_is_renamed():
    labels = {'x': 'x', 'color': 'site'}
    assert bump_aes_labels(labels, 'color') == {'x': 'x', 'color_new': 'site'}
    assert bump_aes_labels(labels, 'fill') == labels
    assert bump_aes_labels(None, 'color') is None


def test_make_guide_by_name():
    assert isinstance(make_guide('legend'), guide_legend)
    assert isinstance(make_guide('colorbar'), guide_colorbar)
    assert isinstance(make_guide('colourbar'), guide_colorbar)


def test_make_guide_unknown_name():
    with pytest.raises(PlotnineError):
        make_guide('wheel')


def test_default_legend_guide_is_instantiated():
    new = bump_aes_scale(scale_color_manual(values=['red', 'blue']), 'color')
    assert isinstance(new.guide, guide_legend)
    assert 'color_new' in new.guide.available_aes


def test_legend_key_size_sees_canonical_names(points):
    layer = first_layer(points, geom_point(aes(color='site')))
    new = bump_aes_layer(layer, 'color')

    assert isinstance(new.geom.legend_key_size, ColumnTranslator)
    assert unwrap(new.geom.legend_key_size) == layer.geom.legend_key_size

    row = pd.Series(dict(new.geom.DEFAULT_AES))
    expected = layer.geom.legend_key_size(pd.Series(dict(layer.geom.DEFAULT_AES)), (0, 0), layer)
    assert 'color_new' in row.index
    assert new.geom.legend_key_size(row, (0, 0), new) == expected


def test_unnamed_scale_gets_title():
    new = bump_aes_scale(scale_color_gradient(), 'color', titles={'color': 'value'})
    assert new.name == 'value'


def test_named_scale_keeps_its_name():
    scale = scale_color_gradient(name='Depth')
    new = bump_aes_scale(scale, 'color', titles={'color': 'value'})
    assert new.name == 'Depth'


@pytest.mark.parametrize('value, title', [
    ('site', 'site'),
    (after_stat('level'), 'level'),
    (None, None),
    (3, None),
])
def test_label_text(value, title):
    assert label_text(value) == title


def test_scope_titles_from_layers(points):
    p = (ggplot(points, aes('x', 'y'))
         + geom_point(aes(color='site'))
         + geom_point(aes(fill='kind'))
         + geom_point(stat=stat_colored()))

    assert scope_titles(p, 'color') == {'color': 'site'}
    assert scope_titles(p, 'fill') == {'fill': 'kind'}


def test_scope_titles_from_stat_default(points):
    p = ggplot(points, aes('x', 'y')) + geom_point(stat=stat_colored())
    assert scope_titles(p, 'color') == {'color': 'y'}


def test_scope_titles_prefer_labels(points):
    p = (ggplot(points, aes('x', 'y', color='season'))
         + geom_point(aes(color='site'))
         + labs(color='Where'))
    assert scope_titles(p, 'color') == {'color': 'Where'}


def test_scope_titles_plot_mapping_before_layers(points):
    p = ggplot(points, aes('x', 'y', color='season')) + geom_point(aes(color='site'))
    assert scope_titles(p, 'color') == {'color': 'season'}
