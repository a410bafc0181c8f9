"""Exceptions raised while building release notes."""


class StorynotesError(Exception):
    """Base class for all storynotes errors."""


class ConfigurationError(StorynotesError):
    """Invalid configuration, unknown repository or unresolvable reference.

    Always fatal: raised before any call to the tracker is made.
    """


class TrackerTransportError(StorynotesError):
    """The tracker could not be reached or rejected our credentials."""


class NotFound(StorynotesError):
    """A story or epic does not exist in the tracker."""

    def __init__(self, kind: str, entity_id: int):
        super().__init__(f"{kind} {entity_id} not found")
        self.kind = kind
        self.entity_id = entity_id


class TemplateError(StorynotesError):
    """The release notes template is invalid or failed to render."""
