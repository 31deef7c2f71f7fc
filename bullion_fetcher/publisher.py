"""Write the latest batch to a JSON file that static pages can load."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from bullion_fetcher.models import FetchResult

logger = logging.getLogger(__name__)


def write_results_json(results: dict[str, FetchResult], path: Path) -> bool:
    """
    Dump ``{name: result}`` plus a generation timestamp to ``path``.

    Returns False (after logging) if the file could not be written.
    """
    payload = {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "prices": {name: result.to_dict() for name, result in results.items()},
    }
    tmp = path.with_name(path.name + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        tmp.replace(path)
    except OSError as e:
        logger.error("Could not write results to %s: %s", path, e)
        try:
            tmp.unlink(missing_ok=True)
        except OSError:
            pass
        return False
    logger.debug("Results written to %s", path)
    return True
