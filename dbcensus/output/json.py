"""JSON output rendering."""
import json  # pylint: disable=import-self,redefined-builtin
from typing import Sequence, Union

from pydantic import BaseModel

def render_json(data: Union[BaseModel, Sequence[BaseModel]]) -> str:
    """Render a model, or a list of models, as an indented JSON string."""
    if isinstance(data, BaseModel):
        return json.dumps(data.model_dump(mode="json"), indent=2)
    return json.dumps([item.model_dump(mode="json") for item in data], indent=2)
