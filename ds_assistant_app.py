import streamlit as st

from config.app_config import get_config
from services.ui_service.chat_interface import get_chat_interface
from utils.logging_config import initialize_logging, get_logger

# Initialize logging and error tracking
error_tracker = initialize_logging(enable_streamlit_handler=True)
logger = get_logger(__name__)

# Get configuration
config = get_config()


def main_app():
    """Main application content"""
    st.set_page_config(page_title=config.ui.app_title, page_icon="💬", layout="wide")

    st.markdown("""
    <style>
    .main-header {
        text-align: center;
        padding: 1rem 0;
        border-bottom: 2px solid #333;
        margin-bottom: 1rem;
    }

    .stChatMessage {
        margin-bottom: 0.5rem;
    }

    .stChatInput > div {
        border-radius: 20px;
    }
    </style>
    """, unsafe_allow_html=True)

    st.markdown(f'<div class="main-header"><h1>{config.ui.app_title}</h1></div>', unsafe_allow_html=True)

    try:
        chat_interface = get_chat_interface()
    except Exception as e:
        error_tracker.track_error(e, "session_initialization")
        st.error("Failed to initialize the chat session. Please refresh the page.")
        return

    chat_interface.render_conversation_sidebar()
    chat_interface.render_chat_area()


main_app()
