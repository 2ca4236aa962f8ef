from __future__ import annotations


class LeafprintError(RuntimeError):
    """Base class for render failures surfaced by the compositor and callout engine."""


class DecodeError(LeafprintError):
    """A single layer's image could not be fetched or decoded."""

    def __init__(self, message: str, *, locator: str | None = None, layer_id: str | None = None) -> None:
        self.locator = locator
        self.layer_id = layer_id
        context = []
        if layer_id is not None:
            context.append(f"layer={layer_id}")
        if locator is not None:
            context.append(f"source={locator}")
        if context:
            message = f"{message} ({', '.join(context)})"
        super().__init__(message)


class EmptySceneError(LeafprintError):
    pass


class UnsupportedLayerError(LeafprintError):
    def __init__(self, kind: object, *, layer_id: str | None = None) -> None:
        self.kind = kind
        self.layer_id = layer_id
        super().__init__(f"unsupported layer kind: {kind!r} (layer={layer_id})")


class NoAnchorError(LeafprintError):
    def __init__(self, callout_id: str, reason: str = "callout has no resolvable geographic anchor") -> None:
        self.callout_id = callout_id
        super().__init__(f"{reason} (callout={callout_id})")
