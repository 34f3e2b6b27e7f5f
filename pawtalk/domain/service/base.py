"""Domain service base."""


class Service:
    """Marker base for engine services.

    One set of services is built per open view; any per-view bookkeeping
    they keep (in-flight toggles, cached profiles) dies with the view.
    """
