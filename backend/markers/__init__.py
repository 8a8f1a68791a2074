"""
Map marker layer: turns clustering results into add/remove calls on a marker sink.

The sink is whatever the host map exposes (`add_marker` / `remove_marker`); see
`markers.types.MarkerSink`. `InMemoryMarkerSink` is the headless implementation.
"""
