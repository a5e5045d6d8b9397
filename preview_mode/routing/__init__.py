from preview_mode.routing.outcome import (  # noqa: F401
    ErrorOutcome,
    LookupSlug,
    Outcome,
    ProxyResource,
    Redirect,
    RenderDigest,
    RenderSingle,
)
from preview_mode.routing.router import (  # noqa: F401
    fallback_outcome,
    first_path_segment,
    is_slug_candidate,
    plan_route,
    route,
)
