"""
OIDC claims request parameter (Core §5.5). Each name is requested as a voluntary ID token claim.
"""
import json
from collections.abc import Sequence


def encode_claims_request(claim_names: Sequence[str]) -> str:
    """Return compact JSON {"id_token": {name: null, ...}}; null marks the claim as voluntary."""
    id_token = {name: None for name in claim_names}
    return json.dumps({"id_token": id_token}, separators=(",", ":"))
