from waygen.classes.markers import MarkerInstance, MarkerType
from waygen.procedural.mission import MissionContext
from waygen.visualization.map2d import Map2DMarkerView


def make_marker(index, mission, body_name="Terra", **kwargs):
    return MarkerInstance(index=index, marker_type=MarkerType.FIXED, body_name=body_name,
                          name=f"Marker {index}", mission=mission, **kwargs)


def test_add_and_remove(mission):
    view = Map2DMarkerView()
    marker = make_marker(0, mission, latitude=10.0, longitude=20.0)

    view.add_marker(marker)
    assert marker in view
    assert len(view) == 1

    view.remove_marker(marker)
    view.remove_marker(marker)
    assert len(view) == 0


def test_markers_keyed_by_mission(mission):
    view = Map2DMarkerView()
    other = MissionContext("contract-2", seed=1)
    view.add_marker(make_marker(0, mission))
    view.add_marker(make_marker(0, other))
    assert len(view) == 2


def test_published_markers_by_body(mission):
    view = Map2DMarkerView()
    view.add_marker(make_marker(0, mission))
    view.add_marker(make_marker(1, mission, body_name="Luna"))
    assert [m.index for m in view.published_markers("Luna")] == [1]
    assert len(view.published_markers()) == 2


def test_save_overview(mission, tmp_path):
    view = Map2DMarkerView(figsize=(4, 2), dpi=50)
    view.add_marker(make_marker(0, mission, latitude=10.0, longitude=20.0))
    view.add_marker(make_marker(1, mission, latitude=-5.0, longitude=-60.0, underwater=True))

    path = tmp_path / "markers.png"
    assert view.save_overview(str(path), body_name="Terra") == str(path)
    assert path.stat().st_size > 0


def test_overview_bytes_is_png(mission):
    view = Map2DMarkerView(figsize=(4, 2), dpi=50)
    view.add_marker(make_marker(0, mission))
    assert view.get_overview_bytes().startswith(b"\x89PNG")
