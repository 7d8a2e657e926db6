"""Province boundary model."""
import uuid
from sqlalchemy import String
from sqlalchemy.dialects.postgresql import UUID, JSONB
from geoalchemy2 import Geometry
from sqlalchemy.orm import Mapped, mapped_column

from commons_youth.database import Base


class ProvinceBoundary(Base):
    """Province polygon used to draw the choropleth map."""

    __tablename__ = "province_boundaries"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    # Original feature properties, kept so alternate name keys survive import
    properties: Mapped[dict] = mapped_column(JSONB, default=dict)

    # Stored in EPSG:4326 as published
    geom = mapped_column(Geometry("MULTIPOLYGON", srid=4326), nullable=False)
