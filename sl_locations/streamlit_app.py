"""Streamlit page for searching and validating Sierra Leone locations."""
import uuid
import pandas as pd
import streamlit as st
from sl_locations.core.config import LOCATIONS_CSV_PATH, LOG_LEVEL
from sl_locations.core.models import LocationHierarchy, LocationType, SearchOptions
from sl_locations.core.security import escape_html
from sl_locations.core.service import LocationService
from sl_locations.utils.error_handler import handle_streamlit_errors
from sl_locations.utils.logging import setup_logging

setup_logging(LOG_LEVEL)


@st.cache_resource
def load_service() -> LocationService:
    """One service per server process, shared by all sessions."""
    return LocationService.from_csv(LOCATIONS_CSV_PATH)


def client_id() -> str:
    """Rate-limit identity of the current browser session."""
    if "client_id" not in st.session_state:
        st.session_state.client_id = uuid.uuid4().hex
    return st.session_state.client_id


@handle_streamlit_errors()
def render_search(service: LocationService):
    st.subheader("Search")
    query = st.text_input("Location name", placeholder="e.g. 'Magbass' or 'Kholifa'")

    type_labels = [t.value for t in LocationType]
    col1, col2, col3 = st.columns([3, 1, 1])
    with col1:
        selected_types = st.multiselect("Levels", type_labels, default=type_labels)
    with col2:
        limit = st.number_input("Max results", min_value=1, max_value=100, value=20)
    with col3:
        fuzzy = st.checkbox("Fuzzy", value=True)

    if not query:
        return

    completions = service.autocomplete(query, client_id=client_id())
    if completions:
        st.caption("Did you mean: " + ", ".join(escape_html(name) for name in completions))

    options = SearchOptions(limit=int(limit), types=tuple(selected_types), fuzzy=fuzzy)
    results = service.search(query, options, client_id=client_id())
    if not results:
        st.info("No matching locations")
        return

    st.dataframe(
        pd.DataFrame([result.to_dict() for result in results]),
        use_container_width=True,
        hide_index=True,
    )


@handle_streamlit_errors()
def render_validation(service: LocationService):
    st.subheader("Validate a location")

    region = st.selectbox("Region", [""] + service.get_provinces())
    district = st.selectbox("District", [""] + service.get_districts(region or None))
    chiefdom = st.selectbox(
        "Chiefdom", [""] + (service.get_chiefdoms(district) if district else [])
    )
    town = st.text_input("Town")

    if not st.button("Validate", type="primary"):
        return

    result = service.validate_hierarchy(LocationHierarchy(
        region=region or None,
        district=district or None,
        chiefdom=chiefdom or None,
        town=town or None,
    ))
    if result.is_valid:
        st.success("✅ Location is valid")
    else:
        for message in (result.message or "").split("; "):
            st.error(escape_html(message))
        if town:
            suggestions = service.is_valid_town(town, chiefdom or None).suggestions
            if suggestions:
                st.info("Suggestions: " + ", ".join(escape_html(s) for s in suggestions))


@handle_streamlit_errors()
def render_statistics(service: LocationService):
    stats = service.get_statistics()
    cols = st.columns(4)
    cols[0].metric("Regions", stats.regions)
    cols[1].metric("Districts", stats.districts)
    cols[2].metric("Chiefdoms", stats.chiefdoms)
    cols[3].metric("Towns", stats.towns)


st.set_page_config(
    page_title="Sierra Leone Locations",
    page_icon="📍",
    layout="wide"
)

st.title("📍 Sierra Leone Location Lookup")
st.markdown("Search, autocomplete and validate administrative locations")

location_service = load_service()
render_statistics(location_service)

search_tab, validate_tab = st.tabs(["Search", "Validate"])
with search_tab:
    render_search(location_service)
with validate_tab:
    render_validation(location_service)
