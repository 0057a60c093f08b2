from typing import Annotated

from pydantic import Field, StrictInt

# Faixa do INTEGER de 32 bits usado nas colunas de id (PostgreSQL int4).
ID_MIN = -(2**31)
ID_MAX = 2**31 - 1

EntityId = Annotated[StrictInt, Field(ge=ID_MIN, le=ID_MAX)]
