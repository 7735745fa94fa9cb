import time
from typing import Any

import numpy as np
import pandas as pd
import streamlit as st

from core import LayoutConfigManager, LayoutEngine, positions_frame, summarize_sweep, sweep_layouts
from logging_config import setup_logging
from models import DeviceClass, LayoutConstraints, LayoutEngineConfig, LayoutRequest
from ui.utils.css_styles import apply_custom_css, get_status_class
from ui.visualization import LayoutVisualizer

# Configure page
st.set_page_config(
    page_title="Card Layout Playground",
    page_icon="🃏",
    layout="wide",
    initial_sidebar_state="expanded",
)

apply_custom_css()

DEVICE_OPTIONS = ["Auto"] + [device.value for device in DeviceClass]


def initialize_session_state():
    """Initialize Streamlit session state variables"""
    if "logging_configured" not in st.session_state:
        setup_logging(level="INFO", enable_file_logging=False)
        st.session_state.logging_configured = True
    if "engine_config" not in st.session_state:
        st.session_state.engine_config = LayoutEngineConfig()
    if "engine" not in st.session_state:
        st.session_state.engine = LayoutEngine(st.session_state.engine_config)
    if "saved_configurations" not in st.session_state:
        st.session_state.saved_configurations = []
    if "performance_history" not in st.session_state:
        st.session_state.performance_history = []
    if "sweep_results" not in st.session_state:
        st.session_state.sweep_results = None


def rebuild_engine(config: LayoutEngineConfig) -> None:
    """Replace the engine after a configuration change"""
    st.session_state.engine.dispose()
    st.session_state.engine_config = config
    st.session_state.engine = LayoutEngine(config)


def constraints_editor(current: LayoutConstraints) -> LayoutConstraints:
    """Sidebar controls for the card size constraints"""
    min_width = st.slider("Minimum card width", 20.0, 200.0, float(current.min_card_width), 2.0)
    max_width = st.slider(
        "Maximum card width", min_width, 400.0, max(float(current.max_card_width), min_width), 2.0
    )
    aspect_ratio = st.slider("Aspect ratio (height / width)", 0.5, 3.0, float(current.aspect_ratio), 0.05)
    safety_factor = st.slider("Safety factor", 0.5, 1.0, float(current.safety_factor), 0.01)
    return LayoutConstraints(
        min_card_width=min_width,
        max_card_width=max_width,
        scale_floor_width=min(current.scale_floor_width, min_width),
        aspect_ratio=aspect_ratio,
        safety_factor=safety_factor,
        overflow_scale_cap=current.overflow_scale_cap,
        fallback_relax_factor=current.fallback_relax_factor,
        fallback_spacing_factor=current.fallback_spacing_factor,
    )


def build_request(card_count: int, width: float, height: float, device: str) -> LayoutRequest:
    if device == "Auto":
        return st.session_state.engine.request_for_viewport(card_count, width, height)
    return LayoutRequest(card_count, width, height, DeviceClass(device))


def record_performance(request: LayoutRequest, elapsed_ms: float, is_optimal: bool) -> None:
    st.session_state.performance_history.append(
        {
            "cards": request.card_count,
            "width": request.container_width,
            "height": request.container_height,
            "elapsed_ms": elapsed_ms,
            "optimal": is_optimal,
        }
    )
    st.session_state.performance_history = st.session_state.performance_history[-50:]


def get_performance_summary() -> dict[str, Any]:
    history = st.session_state.performance_history
    if not history:
        return {}
    timings = np.array([entry["elapsed_ms"] for entry in history])
    return {
        "computations": len(history),
        "mean_ms": float(timings.mean()),
        "p95_ms": float(np.percentile(timings, 95)),
        "fallback_share": sum(1 for entry in history if not entry["optimal"]) / len(history),
    }


def render_sidebar() -> tuple[int, float, float, str]:
    with st.sidebar:
        st.markdown("## 🔧 Viewport")
        card_count = st.slider("Card count", 0, 60, 9)
        width = st.slider("Container width", 200, 4000, 1024, 8)
        height = st.slider("Container height", 200, 4000, 768, 8)
        device = st.selectbox("Device class", DEVICE_OPTIONS)

        st.markdown("---")
        st.markdown("### 📐 Constraints")
        constraints = constraints_editor(st.session_state.engine_config.constraints)
        if constraints != st.session_state.engine_config.constraints:
            config = LayoutEngineConfig.from_dict(
                {**st.session_state.engine_config.to_dict(), "constraints": constraints.to_dict()}
            )
            rebuild_engine(config)

        st.markdown("---")
        st.markdown("### 💾 Configuration")

        if st.button("💾 Save Config"):
            config_name = f"Layout_{len(st.session_state.saved_configurations) + 1}"
            config_json = LayoutConfigManager.save_config(st.session_state.engine_config, config_name)
            st.session_state.saved_configurations.append((config_name, config_json))
            st.success(f"Configuration saved as {config_name}")

        uploaded_config = st.file_uploader(
            "📁 Load Config",
            type=["json"],
            help="Upload a previously saved layout configuration",
        )
        if uploaded_config is not None:
            try:
                config, name = LayoutConfigManager.load_config(uploaded_config.read().decode())
                rebuild_engine(config)
                st.success(f"Loaded configuration: {name}")
            except ValueError as e:
                st.error(f"Error loading configuration: {str(e)}")

        for config_name, config_json in st.session_state.saved_configurations:
            download_link = LayoutConfigManager.create_download_link(
                config_json, f"{config_name}.json"
            )
            st.markdown(download_link, unsafe_allow_html=True)

        st.markdown("---")
        st.markdown("### ⚡ Performance Status")
        summary = get_performance_summary()
        if summary:
            st.metric("Mean compute time", f"{summary['mean_ms']:.2f} ms")
            st.metric("p95 compute time", f"{summary['p95_ms']:.2f} ms")
            st.caption(
                f"{summary['computations']} computations, "
                f"{summary['fallback_share']:.0%} used the fallback"
            )
        cache_stats = st.session_state.engine.cache_stats()
        if cache_stats:
            st.caption(
                f"Cache: {cache_stats['size']}/{cache_stats['max_entries']} entries, "
                f"hit rate {cache_stats['hit_rate']:.0%}"
            )

    return card_count, float(width), float(height), device


def render_layout_tab(request: LayoutRequest, visualizer: LayoutVisualizer) -> None:
    engine = st.session_state.engine

    start_time = time.perf_counter()
    outcome = engine.plan_layout(request)
    elapsed_ms = (time.perf_counter() - start_time) * 1000
    result = outcome.result
    record_performance(request, elapsed_ms, result.is_optimal)

    validation = engine.validate_layout(result, outcome.space)

    st.markdown(
        f'<div class="{get_status_class(result.is_optimal, validation.is_valid)}">'
        f"{result.describe()}<br/><small>{outcome.space.describe()} | "
        f"Device: {request.device_class.value} | {elapsed_ms:.2f} ms</small></div>",
        unsafe_allow_html=True,
    )

    fig = visualizer.create_layout_figure(
        result,
        outcome.space,
        container_width=request.container_width,
        container_height=request.container_height,
        safety_factor=engine.constraints.safety_factor,
    )
    st.plotly_chart(fig, use_container_width=True)

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Rows", result.row_plan.rows)
    col2.metric("Cards per row", result.row_plan.cards_per_row)
    col3.metric("Card size", f"{result.card_size.width:.0f}×{result.card_size.height:.0f}")
    col4.metric("Fill ratio", f"{result.fill_ratio(outcome.space):.1%}")

    capacity = engine.capacity_for(request)
    if request.card_count > capacity.max_safe_cards:
        st.info(
            f"{request.card_count} cards requested; this container holds "
            f"{capacity.max_safe_cards} at the minimum card size "
            f"({capacity.max_rows} rows of up to {capacity.max_cards_per_row})"
        )

    if not result.is_optimal:
        st.warning("Primary plan rejected: " + "; ".join(outcome.rejected.violations))
    for warning in result.warnings:
        st.warning(warning)

    if validation.is_valid:
        st.success("Validation passed")
    else:
        for violation in validation.violations:
            st.error(violation)

    with st.expander("Card positions"):
        st.dataframe(positions_frame(result), use_container_width=True, hide_index=True)


def render_sweep_tab(visualizer: LayoutVisualizer) -> None:
    col1, col2 = st.columns(2)
    with col1:
        max_cards = st.slider("Largest card count", 4, 60, 30)
        height = st.slider("Sweep container height", 200, 4000, 900, 50)
    with col2:
        min_width, max_width = st.slider("Width range", 200, 4000, (320, 1920), 40)
        steps = st.slider("Width steps", 2, 24, 12)
    metric = st.selectbox("Metric", ["fill_ratio", "is_optimal", "card_width", "rows"])

    if st.button("Run sweep"):
        widths = np.linspace(min_width, max_width, steps).round().tolist()
        with st.spinner("Computing layouts..."):
            st.session_state.sweep_results = sweep_layouts(
                st.session_state.engine, range(1, max_cards + 1), widths, [float(height)]
            )

    frame = st.session_state.sweep_results
    if frame is None:
        st.info("Run a sweep to compare layouts across container widths")
        return

    st.plotly_chart(visualizer.create_sweep_heatmap(frame, metric), use_container_width=True)
    summary: pd.DataFrame = summarize_sweep(frame).to_pandas()
    st.dataframe(summary, use_container_width=True, hide_index=True)


def main():
    st.markdown('<h1 class="main-header">Card Layout Playground</h1>', unsafe_allow_html=True)

    initialize_session_state()
    card_count, width, height, device = render_sidebar()
    request = build_request(card_count, width, height, device)
    visualizer = LayoutVisualizer(theme="dark")

    layout_tab, sweep_tab = st.tabs(["🃏 Layout", "📊 Sweep"])
    with layout_tab:
        render_layout_tab(request, visualizer)
    with sweep_tab:
        render_sweep_tab(visualizer)


if __name__ == "__main__":
    main()
