"""
Route du proxy de géocodage.

`POST /functions/v1/geocode` accepte un corps JSON:
- `{"query": str}` → liste brute des candidats du géocodeur amont;
- `{"lat": number, "lon": number}` → objet brut du géocodage inverse.

Contrôles dans l'ordre: clé applicative, rate limiting par client, validation des entrées (avant
tout appel sortant), puis relais amont. Un échec amont devient une 500 générique.
"""

from typing import Any

from fastapi import APIRouter, Depends

from housesit.api.deps import enforce_rate_limit, get_container, read_json_object, require_app_key
from housesit.apigw.errors import bad_request, upstream_failure
from housesit.app.metrics import GEOCODE_REQUESTS
from housesit.core.container import Container
from housesit.domain.geocode_proxy import InvalidInput, is_reverse_request
from housesit.infra.http_clients import UpstreamError

router = APIRouter(prefix="/functions/v1", tags=["geocode"])


@router.post(
    "/geocode",
    dependencies=[Depends(require_app_key), Depends(enforce_rate_limit)],
)
def geocode(
    payload: dict[str, Any] = Depends(read_json_object),
    container: Container = Depends(get_container),
):
    """
    Géocodage direct ou inverse selon le corps de la requête.

    Paramètres:
    - payload: `{"query": ...}` ou `{"lat": ..., "lon": ...}`.

    Retour: la réponse du géocodeur amont, sans transformation.
    """
    mode = "reverse" if is_reverse_request(payload) else "forward"
    try:
        result = container.geocode_proxy.handle(payload)
    except InvalidInput as err:
        GEOCODE_REQUESTS.labels(mode=mode, outcome="invalid").inc()
        raise bad_request(str(err)) from err
    except UpstreamError as err:
        GEOCODE_REQUESTS.labels(mode=mode, outcome="upstream_error").inc()
        raise upstream_failure(err.message) from err
    GEOCODE_REQUESTS.labels(mode=mode, outcome="ok").inc()
    return result
