"""Build the administrative hierarchy (region > district > chiefdom > town) from flat records."""
from typing import Dict, Iterable, Iterator, List, Tuple, Union
from sl_locations.core.exceptions import FormatError
from sl_locations.core.models import FlatRecord, Province, District, Chiefdom, Town
from sl_locations.core.normalization import generate_code
from sl_locations.utils.timing import time_function

HierarchyNode = Union[Province, District, Chiefdom, Town]


@time_function
def build_hierarchy(records: Iterable[FlatRecord]) -> List[Province]:
    """
    Convert flat records into a four-level tree.

    Records are walked in input order. Provinces, districts and chiefdoms are
    created the first time their (region), (region, district) or
    (region, district, chiefdom) key is seen; every record appends a new town,
    so repeated rows yield repeated towns.

    Args:
        records: Flat records, already sanitized

    Returns:
        Provinces in first-seen order

    Raises:
        FormatError: If no record has both a region and a town
    """
    province_map: Dict[str, Province] = {}
    district_map: Dict[Tuple[str, str], District] = {}
    chiefdom_map: Dict[Tuple[str, str, str], Chiefdom] = {}

    for record in records:
        if not record.region or not record.town:
            continue

        province = province_map.get(record.region)
        if province is None:
            province = Province(
                name=record.region,
                code=generate_code("PROVINCE", record.region),
            )
            province_map[record.region] = province

        district_key = (record.region, record.district)
        district = district_map.get(district_key)
        if district is None:
            district = District(
                name=record.district,
                code=generate_code("DISTRICT", record.district),
                province=record.region,
                province_code=province.code,
            )
            district_map[district_key] = district
            province.districts.append(district)

        chiefdom_key = (record.region, record.district, record.chiefdom)
        chiefdom = chiefdom_map.get(chiefdom_key)
        if chiefdom is None:
            chiefdom = Chiefdom(
                name=record.chiefdom,
                code=generate_code("CHIEFDOM", record.chiefdom),
                district=record.district,
                district_code=district.code,
                province=record.region,
                province_code=province.code,
            )
            chiefdom_map[chiefdom_key] = chiefdom
            district.chiefdoms.append(chiefdom)

        chiefdom.towns.append(Town(
            name=record.town,
            code=generate_code("TOWN", record.town),
            chiefdom=record.chiefdom,
            chiefdom_code=chiefdom.code,
            district=record.district,
            district_code=district.code,
            province=record.region,
            province_code=province.code,
            section=record.section,
            council=record.council,
        ))

    if not province_map:
        raise FormatError("No records with both a region and a town name")

    return list(province_map.values())


def iter_tree_records(provinces: Iterable[Province]) -> Iterator[Tuple[HierarchyNode, FlatRecord]]:
    """
    Walk the tree depth-first, yielding each node with a record describing its position.

    The record for a node carries the names of the node and its ancestors and
    leaves lower levels empty; a town's record also carries its section and council.
    """
    for province in provinces:
        province_record = FlatRecord(region=province.name)
        yield province, province_record
        for district in province.districts:
            district_record = FlatRecord(region=province.name, district=district.name)
            yield district, district_record
            for chiefdom in district.chiefdoms:
                chiefdom_record = FlatRecord(
                    region=province.name,
                    district=district.name,
                    chiefdom=chiefdom.name,
                )
                yield chiefdom, chiefdom_record
                for town in chiefdom.towns:
                    yield town, FlatRecord(
                        region=province.name,
                        district=district.name,
                        council=town.council or "",
                        chiefdom=chiefdom.name,
                        section=town.section or "",
                        town=town.name,
                    )
