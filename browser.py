"""Streamlit UI for browsing a knowledge graph.

Run with: streamlit run browser.py

Features:
- Load sample data or fetch a graph from the backend
- Toggle document/chunk, entity and community categories
- Search nodes by caption and properties
- Graph view, schema view and node table
- Inspect a selected node or relationship
"""

import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

import pandas as pd
import streamlit as st
from graph_view import (
    CancellationToken,
    ConnectionSettings,
    FilterStatus,
    GraphNormalizer,
    GraphQueryClient,
    GraphSession,
    GraphType,
    LoadStatus,
    PlotlyGraphWidget,
    SampleDataGenerator,
    ViewerConfig,
)
from graph_view.query_client import query_type_for
from graph_view.sample_data import SAMPLE_FILES

st.set_page_config(
    page_title="Graph Viewer",
    page_icon="🕸️",
    layout="wide",
)

st.title("🕸️ Graph Visualization")

CATEGORY_NAMES = {
    GraphType.DOCUMENT_CHUNK: "Document & Chunk",
    GraphType.ENTITIES: "Entities",
    GraphType.COMMUNITIES: "Communities",
}

STATUS_MESSAGES = {
    FilterStatus.EMPTY_GRAPH: "No graph data available. Load sample data or connect to your backend first.",
    FilterStatus.NOTHING_SELECTED: "Select at least one category to display the graph.",
    FilterStatus.NO_MATCHES: "No nodes match the current categories and search.",
}


@st.cache_resource
def get_config():
    """Get cached config."""
    config = ViewerConfig.from_env()
    logging.basicConfig(level=config.log_level)
    return config


def get_session():
    """Get the session of this browser tab."""
    if "graph_session" not in st.session_state:
        config = get_config()
        st.session_state.graph_session = GraphSession(
            normalizer=GraphNormalizer(caption_max_length=config.caption_max_length),
        )
    return st.session_state.graph_session


def get_widget():
    """Get the graph widget of this browser tab."""
    if "graph_widget" not in st.session_state:
        st.session_state.graph_widget = PlotlyGraphWidget()
    return st.session_state.graph_widget


def get_connection():
    """Get the connection form state of this browser tab."""
    if "connection" not in st.session_state:
        config = get_config()
        st.session_state.connection = ConnectionSettings(
            uri=config.neo4j_uri,
            username=config.neo4j_username,
            password=config.neo4j_password,
            database=config.neo4j_database,
            document_names=[SAMPLE_FILES[0]],
        )
    return st.session_state.connection


def show_load_result(result):
    """Report a load outcome to the user."""
    if result.status == LoadStatus.SUCCESS:
        st.success(f"✅ {result.message}")
        if result.report and result.report.dropped:
            st.caption(
                f"Skipped {result.report.skipped_nodes} malformed nodes, "
                f"{result.report.skipped_relationships} malformed relationships and "
                f"{result.report.dangling_relationships} dangling relationships"
            )
    elif result.status == LoadStatus.NO_DATA:
        st.info(result.message)
    elif result.status == LoadStatus.FAILED:
        st.error(result.message)


def sidebar(session, connection):
    """Data loading controls."""
    with st.sidebar:
        st.header("⚙️ Data")

        st.subheader("🧪 Sample Data")
        documents = st.slider("Documents", 1, 8, 2)
        chunks = st.slider("Chunks per document", 1, 10, 3)
        entities = st.slider("Entities per chunk", 0, 5, 2)
        communities = st.slider("Communities", 0, 4, 2)
        if st.button("Load Sample Data", type="primary"):
            result = session.load_sample(
                SampleDataGenerator(),
                documents=documents,
                chunks_per_document=chunks,
                entities_per_chunk=entities,
                communities=communities,
            )
            show_load_result(result)

        st.divider()

        st.subheader("🔌 Backend Connection")
        connection.uri = st.text_input("Neo4j URI", connection.uri, placeholder="neo4j+ssc://your-database.neo4j.io")
        connection.database = st.text_input("Database", connection.database)
        connection.username = st.text_input("Username", connection.username)
        connection.password = st.text_input("Password", connection.password, type="password")

        st.caption(f"{len(connection.document_names)} file{'s' if len(connection.document_names) != 1 else ''} selected")
        for index, name in enumerate(list(connection.document_names)):
            col1, col2 = st.columns([5, 1])
            col1.write(f"📄 {name}")
            if col2.button("✖", key=f"remove_doc_{index}", help="Remove file"):
                connection.remove_document(index)
                st.rerun()

        new_name = st.text_input("Add file", placeholder="Enter file name (e.g., document1.pdf)")
        col1, col2, col3 = st.columns(3)
        if col1.button("Add", disabled=not new_name.strip()):
            connection.add_document(new_name)
            st.rerun()
        if col2.button("Clear All", disabled=not connection.document_names):
            connection.clear_documents()
            st.rerun()
        if col3.button("Add Samples"):
            connection.add_documents(SAMPLE_FILES)
            st.rerun()

        if st.button("Load Backend Data", disabled=not connection.is_complete):
            config = get_config()
            client = GraphQueryClient(config.backend_url, timeout=config.timeout)
            token = CancellationToken(config.timeout)
            with st.spinner("Connecting to Neo4j..."):
                result = session.load_from_backend(
                    client,
                    connection,
                    query_type=query_type_for(session.active_categories) or "Entities",
                    token=token,
                )
            client.close()
            show_load_result(result)

        st.divider()

        if st.button("🗑️ Clear All Data"):
            session.clear()
            st.rerun()


def category_controls(session):
    """Category checkboxes, disabled for categories without nodes."""
    conditions = session.checkbox_conditions()
    cols = st.columns(len(CATEGORY_NAMES))
    for col, (graph_type, name) in zip(cols, CATEGORY_NAMES.items()):
        with col:
            checked = st.checkbox(
                name,
                value=graph_type in session.active_categories,
                disabled=not conditions[graph_type],
                key=f"category_{graph_type.value}",
            )
            if checked != (graph_type in session.active_categories):
                session.toggle_category(graph_type)


def zoom_controls(widget, view):
    """Zoom and fit buttons."""
    col1, col2, col3, col4 = st.columns([1, 1, 1, 6])
    if col1.button("➕", help="Zoom in"):
        widget.zoom_in()
    if col2.button("➖", help="Zoom out"):
        widget.zoom_out()
    if col3.button("⛶", help="Zoom to fit"):
        widget.fit(view.node_ids)
    col4.caption(f"Zoom: {widget.get_scale():.2f}x")


def legend(scheme):
    """Color legend for the visible labels."""
    if not scheme:
        return
    cols = st.columns(min(len(scheme), 6))
    for index, (label, color) in enumerate(scheme.items()):
        with cols[index % len(cols)]:
            st.markdown(
                f'<div style="background-color: {color}; padding: 6px; border-radius: 5px; '
                f'text-align: center; color: white; margin-bottom: 4px;">{label}</div>',
                unsafe_allow_html=True,
            )


def details(session, view):
    """Selected node or relationship."""
    options = [("node", node.id) for node in view.nodes] + [
        ("relationship", rel.id) for rel in view.relationships
    ]
    if not options:
        st.info("Nothing to inspect.")
        return

    choice = st.selectbox(
        "Select an item",
        options,
        format_func=lambda item: f"{item[0]}: {item[1]}",
        index=None,
    )
    if choice is None:
        session.clear_selection()
        return

    session.select(*choice)
    item = session.selected_item()
    if item is not None:
        st.json(item.to_dict())


def main():
    """Main UI."""
    session = get_session()
    widget = get_widget()
    connection = get_connection()

    sidebar(session, connection)

    if session.last_result.status == LoadStatus.FAILED:
        st.error(session.last_result.message)

    category_controls(session)
    session.set_query(st.text_input("🔍 Search", session.query, placeholder="Search nodes by name or property"))

    view = session.visible()

    graph_tab, schema_tab, table_tab, details_tab = st.tabs([
        "🕸️ Graph",
        "🧬 Schema",
        "📋 Nodes",
        "🔎 Details",
    ])

    with graph_tab:
        if view.status != FilterStatus.OK:
            st.info(STATUS_MESSAGES[view.status])
        else:
            st.caption(f"{len(view.nodes)} nodes, {len(view.relationships)} relationships")
            zoom_controls(widget, view)
            widget.set_nodes(view.nodes)
            widget.set_relationships(view.relationships)
            show_captions = st.checkbox("Show captions", value=True)
            st.plotly_chart(widget.to_figure(show_captions=show_captions), use_container_width=True)
            legend(view.scheme)

    with schema_tab:
        filtered = st.checkbox("Summarize visible nodes only", value=False)
        summary = session.schema(filtered=filtered)
        if not summary.nodes:
            st.info("No schema to show.")
        else:
            schema_widget = PlotlyGraphWidget(layout="circular", height=450)
            schema_widget.set_nodes(summary.nodes)
            schema_widget.set_relationships(summary.relationships)
            st.plotly_chart(schema_widget.to_figure(), use_container_width=True)
            st.dataframe(
                pd.DataFrame([
                    {"type": rel.type, "from": rel.from_id, "to": rel.to_id, "count": rel.properties["count"]}
                    for rel in summary.relationships
                ]),
                use_container_width=True,
            )

    with table_tab:
        if view.nodes:
            df = pd.DataFrame([
                {
                    "id": node.id,
                    "label": node.primary_label,
                    "caption": node.caption,
                    "color": node.color,
                    "properties": len(node.properties),
                }
                for node in view.nodes
            ])
            st.dataframe(df, use_container_width=True)
        else:
            st.info("No nodes to show.")

    with details_tab:
        details(session, view)


if __name__ == "__main__":
    main()
