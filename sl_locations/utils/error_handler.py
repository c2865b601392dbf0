"""Error handling for the Streamlit page."""
import streamlit as st
import traceback
import functools
from typing import Callable
from sl_locations.core.exceptions import (
    LocationError,
    NotInitializedError,
    RateLimitError,
    ValidationError,
)
from sl_locations.utils.logging import log_error


def user_message(error: Exception) -> str:
    """Message shown to the user for an exception raised by a query."""
    if isinstance(error, RateLimitError):
        return "Too many requests. Please wait a minute and try again."
    if isinstance(error, ValidationError):
        message = error.message
        if error.suggestions:
            message += f" Did you mean: {', '.join(error.suggestions)}?"
        return message
    if isinstance(error, NotInitializedError):
        return "Location data has not been loaded yet."
    if isinstance(error, LocationError):
        return f"Location data error: {error}"
    return f"An error occurred: {error}"


def handle_streamlit_errors(show_details: bool = True, reraise: bool = False):
    """
    Decorator to handle errors in Streamlit pages.

    Rejected input and rate-limit denials are shown as warnings; anything
    else is logged with log_error and shown as an error.

    Args:
        show_details: Whether to show the traceback in an expander
        reraise: Whether to re-raise the exception (for development)

    Usage:
        @handle_streamlit_errors()
        def render_page():
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except (ValidationError, RateLimitError) as e:
                st.warning(user_message(e))
                if reraise:
                    raise
            except Exception as e:
                log_error(e, {
                    "module": func.__module__,
                    "function": func.__name__,
                    "streamlit_page": True,
                })

                st.error(f"❌ {user_message(e)}")

                if show_details:
                    with st.expander("🔍 Error Details (for debugging)", expanded=False):
                        st.code(traceback.format_exc(), language="python")
                        st.json({
                            "module": func.__module__,
                            "function": func.__name__,
                            "error_type": type(e).__name__,
                        })

                if reraise:
                    raise

        return wrapper
    return decorator
