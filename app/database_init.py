"""
Database initialization and reference data seeding.

Creates tables, then seeds standard locations and ISO container types when
their tables are empty. Runs once at application startup.
"""

from decimal import Decimal
import logging

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db_session, init_db
from app.models.container_type import ContainerType
from app.models.location import Location, LocationType

logger = logging.getLogger(__name__)


# (code, name, country, country_code)
DEFAULT_SEA_PORTS = [
    ("SHP_USNY", "Port of New York", "United States", "USA"),
    ("SHP_USLB", "Port of Long Beach", "United States", "USA"),
    ("SHP_CNSHG", "Port of Shanghai", "China", "CHN"),
    ("SHP_CNSZN", "Port of Shenzhen", "China", "CHN"),
    ("SHP_SGSIN", "Port of Singapore", "Singapore", "SGP"),
    ("SHP_NLRTM", "Port of Rotterdam", "Netherlands", "NLD"),
    ("SHP_DEHAM", "Port of Hamburg", "Germany", "DEU"),
    ("SHP_AEJEA", "Port of Jebel Ali", "UAE", "ARE"),
    ("SHP_JPYOK", "Port of Yokohama", "Japan", "JPN"),
    ("SHP_INMUN", "JNPT Mumbai (Nhava Sheva)", "India", "IND"),
    ("SHP_INMAA", "Chennai Port", "India", "IND"),
    ("SHP_INCCU", "Kolkata Port", "India", "IND"),
    ("SHP_INKOC", "Kochi Port", "India", "IND"),
    ("SHP_INVTZ", "Visakhapatnam Port", "India", "IND"),
    ("SHP_INKAN", "Kandla Port", "India", "IND"),
    ("SHP_INPAV", "Paradip Port", "India", "IND"),
    ("SHP_INTUT", "Tuticorin Port", "India", "IND"),
    ("SHP_INMNG", "Mangalore Port", "India", "IND"),
    ("SHP_INGOA", "Mormugao Port (Goa)", "India", "IND"),
]

DEFAULT_AIRPORTS = [
    ("AIR_USLAX", "Los Angeles International Airport", "United States", "USA"),
    ("AIR_USJFK", "John F. Kennedy International Airport", "United States", "USA"),
    ("AIR_GBLON", "Heathrow Airport", "United Kingdom", "GBR"),
    ("AIR_DEFRM", "Frankfurt Airport", "Germany", "DEU"),
    ("AIR_NLAMM", "Amsterdam Airport Schiphol", "Netherlands", "NLD"),
    ("AIR_AEDXB", "Dubai International Airport", "UAE", "ARE"),
    ("AIR_CNPEK", "Beijing Capital International Airport", "China", "CHN"),
    ("AIR_CNPVG", "Shanghai Pudong International Airport", "China", "CHN"),
    ("AIR_SGSIN", "Singapore Changi Airport", "Singapore", "SGP"),
    ("AIR_JPNRT", "Narita International Airport", "Japan", "JPN"),
    ("AIR_INDEL", "Indira Gandhi International Airport (Delhi)", "India", "IND"),
    ("AIR_INMUM", "Chhatrapati Shivaji Maharaj International Airport (Mumbai)", "India", "IND"),
    ("AIR_INBLR", "Kempegowda International Airport (Bangalore)", "India", "IND"),
    ("AIR_INMAA", "Chennai International Airport", "India", "IND"),
    ("AIR_INCCU", "Netaji Subhash Chandra Bose International Airport (Kolkata)", "India", "IND"),
    ("AIR_INHYD", "Rajiv Gandhi International Airport (Hyderabad)", "India", "IND"),
    ("AIR_INKOC", "Cochin International Airport (Kochi)", "India", "IND"),
    ("AIR_INAHD", "Sardar Vallabhbhai Patel International Airport (Ahmedabad)", "India", "IND"),
    ("AIR_INPNE", "Pune Airport", "India", "IND"),
    ("AIR_INGAU", "Lokpriya Gopinath Bordoloi International Airport (Guwahati)", "India", "IND"),
]

# code, name, description, length, width, height (m), max gross, tare (kg), refrigerated
DEFAULT_CONTAINER_TYPES = [
    ("20GP", "20ft General Purpose", "Standard 20-foot dry container for general cargo",
     "5.90", "2.35", "2.39", "30480", "2230", False),
    ("20HC", "20ft High Cube", "20-foot high cube container with extra height",
     "5.90", "2.35", "2.69", "30480", "2230", False),
    ("40GP", "40ft General Purpose", "Standard 40-foot dry container for general cargo",
     "12.03", "2.35", "2.39", "30480", "3740", False),
    ("40HC", "40ft High Cube", "40-foot high cube container with extra height",
     "12.03", "2.35", "2.69", "30480", "3740", False),
    ("20RF", "20ft Refrigerated", "20-foot refrigerated container for temperature-controlled cargo",
     "5.44", "2.29", "2.27", "30480", "3080", True),
    ("40RF", "40ft Refrigerated", "40-foot refrigerated container for temperature-controlled cargo",
     "11.56", "2.29", "2.27", "30480", "4800", True),
    ("40RH", "40ft Refrigerated High Cube", "40-foot refrigerated high cube container",
     "11.56", "2.29", "2.57", "30480", "4800", True),
    ("20OT", "20ft Open Top", "20-foot open top container for oversized cargo",
     "5.90", "2.35", "2.39", "30480", "2300", False),
    ("40OT", "40ft Open Top", "40-foot open top container for oversized cargo",
     "12.03", "2.35", "2.39", "30480", "3900", False),
    ("20FR", "20ft Flat Rack", "20-foot flat rack container for heavy or oversized cargo",
     "5.90", "2.35", "2.39", "45000", "2360", False),
    ("40FR", "40ft Flat Rack", "40-foot flat rack container for heavy or oversized cargo",
     "12.03", "2.35", "2.39", "45000", "5000", False),
]


async def seed_locations(session: AsyncSession) -> int:
    """Seed default sea ports and airports if the table is empty."""
    existing = (await session.execute(select(func.count(Location.id)))).scalar() or 0
    if existing > 0:
        logger.info(f"Locations already exist ({existing} found). Skipping seed.")
        return 0

    seeds = [(row, LocationType.SEA_PORT) for row in DEFAULT_SEA_PORTS]
    seeds += [(row, LocationType.AIRPORT) for row in DEFAULT_AIRPORTS]

    for (code, name, country, country_code), location_type in seeds:
        session.add(Location(
            code=code,
            name=name,
            country=country,
            country_code=country_code,
            location_type=location_type.value,
            is_active=True,
        ))

    await session.commit()
    logger.info(f"Seeded {len(seeds)} locations")
    return len(seeds)


async def seed_container_types(session: AsyncSession) -> int:
    """Seed the standard ISO container types if the table is empty."""
    existing = (await session.execute(select(func.count(ContainerType.id)))).scalar() or 0
    if existing > 0:
        logger.info(f"Container types already exist ({existing} found). Skipping seed.")
        return 0

    for code, name, description, length, width, height, gross, tare, refrigerated in DEFAULT_CONTAINER_TYPES:
        container_type = ContainerType(
            code=code,
            name=name,
            description=description,
            length_m=Decimal(length),
            width_m=Decimal(width),
            height_m=Decimal(height),
            max_gross_weight_kg=Decimal(gross),
            tare_weight_kg=Decimal(tare),
            is_refrigerated=refrigerated,
            is_active=True,
        )
        container_type.apply_derived_values()
        session.add(container_type)

    await session.commit()
    logger.info(f"Seeded {len(DEFAULT_CONTAINER_TYPES)} container types")
    return len(DEFAULT_CONTAINER_TYPES)


async def startup_initialization():
    """
    Main startup initialization.

    Steps:
    1. Create tables
    2. Seed reference data (when SEED_REFERENCE_DATA is enabled)
    """
    logger.info("=== Startup initialization ===")

    await init_db()

    if settings.SEED_REFERENCE_DATA:
        async with get_db_session() as session:
            await seed_locations(session)
            await seed_container_types(session)

    logger.info("=== Startup initialization complete ===")
