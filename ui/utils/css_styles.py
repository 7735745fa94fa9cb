"""
CSS Styles Module for the Card Layout Playground
================================================

This module contains the CSS styles for the Streamlit playground.

Usage:
    from ui.utils.css_styles import apply_custom_css
    apply_custom_css()
"""

import streamlit as st


def get_custom_css() -> str:
    """
    Get the custom CSS styles for the application.

    Returns:
        str: CSS styles as a string
    """
    return """
<style>
    .main-header {
        font-size: 2.25rem;
        font-weight: 700;
        margin-bottom: 1rem;
        text-align: center;
    }
    .status-card {
        padding: 0.75rem 1rem;
        border-radius: 0.5rem;
        margin: 0.5rem 0;
        font-weight: 500;
    }
    .status-optimal {
        border: 2px solid #3b82f6;
        background: rgba(59, 130, 246, 0.08);
    }
    .status-degraded {
        border: 2px solid #f59e0b;
        background: rgba(245, 158, 11, 0.08);
    }
    .status-invalid {
        border: 2px solid #ef4444;
        background: rgba(239, 68, 68, 0.08);
    }
</style>
"""


def apply_custom_css() -> None:
    """
    Apply custom CSS styles to the Streamlit application.

    Call once at the beginning of the application.
    """
    st.markdown(get_custom_css(), unsafe_allow_html=True)


def get_status_class(is_optimal: bool, is_valid: bool) -> str:
    """
    Get the CSS class for a layout status card.

    Args:
        is_optimal: Whether the primary plan was accepted
        is_valid: Whether the returned layout passed validation

    Returns:
        str: CSS class names
    """
    if not is_valid:
        return "status-card status-invalid"
    if not is_optimal:
        return "status-card status-degraded"
    return "status-card status-optimal"
