from typing import Any, Dict

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, ValidationError

from griddler import hint, solve
from griddler.format.dense import DenseGrid
from griddler.format.plain import PlainGrid
from griddler.grid.sources import GridSource, parse_source
from griddler.logging_utils import get_logger

logger = get_logger("api")

app = FastAPI()


class SolveRequest(BaseModel):
    dense: DenseGrid | None = None
    plain: PlainGrid | None = None
    width: int | None = None
    height: int | None = None

    def to_source(self) -> GridSource:
        """Exactly one of dense / plain / (width, height) must be given."""
        given: list[Dict[str, Any]] = [
            s.model_dump() for s in (self.dense, self.plain) if s is not None
        ]
        if self.width is not None or self.height is not None:
            if self.width is None or self.height is None:
                raise ValueError("width and height must be given together")
            given.append({"width": self.width, "height": self.height})
        if len(given) != 1:
            raise ValueError("Provide exactly one of 'dense', 'plain' or 'width'/'height'.")
        return parse_source(given[0])


# async なしの def: FastAPI のスレッドプールで実行される
@app.post("/api/solve")
def api_solve(request: SolveRequest):
    """
    Solver API endpoint.
    Receives a grid (dense / plain / dimensions) and runs the deduction engine.
    """
    try:
        return solve(request.to_source())
    except (ValueError, ValidationError) as e:
        # InfeasibleLabelError / MalformedEncodingError / GridSourceError are ValueErrors
        logger.warning("api_solve rejected: %s", e)
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/api/hint")
def api_hint(request: SolveRequest):
    """
    Hint API endpoint.
    Returns the line to look at next, or null when no line yields anything.
    """
    try:
        return {"hint": hint(request.to_source())}
    except (ValueError, ValidationError) as e:
        logger.warning("api_hint rejected: %s", e)
        raise HTTPException(status_code=400, detail=str(e))
