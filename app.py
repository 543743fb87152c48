import streamlit as st
from PIL import UnidentifiedImageError

import config
import gemini_client
from gemini_client import LINKEDIN_PROMPT
from state import (
    clear_history,
    clear_upload,
    download_payload,
    handle_upload,
    init_state,
    is_generating,
    open_image,
    request_generation,
    run_generation,
)

config.configure_logging()

st.set_page_config(page_title="ProfilePro AI", layout="wide")

# Initialize session state
init_state(st.session_state)
if "model" not in st.session_state:
    st.session_state.model = config.DEFAULT_MODEL


# --- Helper functions ---
@st.cache_resource
def get_client(api_key):
    return gemini_client.create_client(api_key)


def edit(image_url, mime_type, prompt):
    client = get_client(config.get_api_key())
    return gemini_client.edit_image(
        image_url, mime_type, prompt, client=client, model=st.session_state.model
    )


def on_upload():
    uploaded_file = st.session_state.get("upload")
    if uploaded_file is None:
        clear_upload(st.session_state)
        return
    handle_upload(st.session_state, uploaded_file.getvalue(), uploaded_file.type)


def on_custom_edit():
    request_generation(st.session_state, st.session_state.get("custom_prompt", ""))


def show_image(image, caption):
    try:
        picture = open_image(image)
    except UnidentifiedImageError:
        st.warning(f"{caption}: preview unavailable for this {image['mime_type']} file.")
        return
    width, height = picture.size
    st.image(picture, caption=f"{caption} · {width}×{height}")


busy = is_generating(st.session_state)

# --- Sidebar ---
st.sidebar.title("Settings")
model_labels = list(config.MODEL_OPTIONS.keys())
model_ids = list(config.MODEL_OPTIONS.values())
selected_model = st.sidebar.selectbox(
    "Model:",
    model_labels,
    index=model_ids.index(st.session_state.model) if st.session_state.model in model_ids else 0,
    disabled=busy,
    help="""
- **Gemini 2.5 Flash Image**: fast edits, good likeness.
- **Gemini 3 Pro Image**: slower, more detail.
""",
)
st.session_state.model = config.MODEL_OPTIONS[selected_model]

if not config.get_api_key():
    st.sidebar.warning("GEMINI_API_KEY is not set. Generation will fail until it is configured.")

with st.sidebar.expander("Edit history", expanded=True):
    if st.session_state.edit_history:
        for step, prompt in enumerate(st.session_state.edit_history, start=1):
            label = "Professional headshot" if prompt == LINKEDIN_PROMPT else prompt
            st.markdown(f"{step}. {label}")
        st.button("Clear history", on_click=clear_history, args=(st.session_state,), disabled=busy)
    else:
        st.write("No edits yet.")

# --- Header ---
st.title("ProfilePro AI")
st.caption(f"Powered by {selected_model}")

left, right = st.columns(2, gap="large")

# --- Upload & original ---
with left:
    with st.container(border=True):
        st.subheader("1. Upload Base Photo")
        st.file_uploader(
            "Click to upload your photo",
            type=["png", "jpg", "jpeg", "webp"],
            key="upload",
            on_change=on_upload,
            disabled=busy,
            help="JPG, PNG up to 5MB",
        )
        if st.session_state.original_image:
            show_image(st.session_state.original_image, "Original")

    if st.session_state.original_image:
        with st.container(border=True):
            st.subheader("2. Generate Profile")
            st.markdown(
                "Transform your photo into a professional LinkedIn headshot "
                "using our optimized corporate prompt."
            )
            st.button(
                "Generate Professional Photo",
                key="generate",
                type="primary",
                on_click=request_generation,
                args=(st.session_state, LINKEDIN_PROMPT),
                disabled=busy,
            )

# --- Result & custom edits ---
with right:
    with st.container(border=True):
        st.subheader("Result")
        payload = download_payload(st.session_state)
        if payload and not busy:
            data, file_name, mime = payload
            st.download_button("Download", data, file_name=file_name, mime=mime)

        if busy:
            with st.spinner("Applying AI magic..."):
                run_generation(st.session_state, edit)
            st.rerun()
        elif st.session_state.generated_image:
            show_image(st.session_state.generated_image, "Generated Profile")
        else:
            st.info("Your generated photo will appear here")

        if st.session_state.error:
            st.error(st.session_state.error)

    with st.container(border=True):
        st.markdown("**Custom Edits**")
        st.caption(
            'Want to tweak the result? Try prompts like "Add a retro filter", '
            '"Make the background a busy cafe", or "Change shirt to black".'
        )
        with st.form("custom_edit", border=False):
            st.text_input(
                "Custom prompt",
                key="custom_prompt",
                placeholder="e.g., Add a retro filter...",
                label_visibility="collapsed",
                disabled=busy or not st.session_state.original_image,
            )
            st.form_submit_button(
                "Apply",
                on_click=on_custom_edit,
                disabled=busy or not st.session_state.original_image,
            )
