import streamlit as st
from io import BytesIO
from typing import Dict
from xml.sax.saxutils import escape

from docx import Document
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from league_hub.mutations import ConstitutionEditor

BUFFER_KEY = "constitution_buffer"
EMPTY_CONTENT_TEXT = 'No constitution content available. Click "Edit" to add it!'


def export_docx(title: str, text: str) -> BytesIO:
    doc = Document()
    doc.add_heading(title, 0)
    doc.add_paragraph(text)

    buffer = BytesIO()
    doc.save(buffer)
    buffer.seek(0)
    return buffer


def export_pdf(title: str, text: str) -> BytesIO:
    buffer = BytesIO()
    pdf = SimpleDocTemplate(buffer)
    styles = getSampleStyleSheet()
    story = [Paragraph(escape(title), styles['Title']), Spacer(1, 12)]

    # Paragraph parses inline markup, so the text is escaped first
    for line in text.split("\n"):
        if line.strip():
            story.append(Paragraph(escape(line), styles['Normal']))
            story.append(Spacer(1, 6))

    pdf.build(story)
    buffer.seek(0)
    return buffer


class ConstitutionModule:
    """The league's rules document: read, edit, download"""

    def __init__(self, editor: ConstitutionEditor):
        self.editor = editor

    def build(self, state) -> Dict:
        return {
            'title': f"{state.league.name} Constitution",
            'user_id': state.user_id,
            'text': state.constitution_text,
            'exists': state.constitution is not None,
            'loaded': state.constitution_loaded
        }

    def _begin(self, current):
        self.editor.begin(current)
        st.session_state[BUFFER_KEY] = self.editor.buffer

    def _cancel(self, current):
        self.editor.cancel(current)
        st.session_state[BUFFER_KEY] = self.editor.buffer

    def _sync_buffer(self):
        self.editor.buffer = st.session_state.get(BUFFER_KEY, "")

    def _save(self):
        self._sync_buffer()
        self.editor.save()

    def render_editor(self, state):
        # Streamlit drops a widget's key on any run that skips the widget
        if BUFFER_KEY not in st.session_state:
            st.session_state[BUFFER_KEY] = self.editor.buffer

        with st.container(border=True):
            st.subheader("Edit Constitution")
            st.text_area(
                "Constitution",
                key=BUFFER_KEY,
                on_change=self._sync_buffer,
                height=400,
                placeholder="Write your league's constitution here...",
                label_visibility="collapsed"
            )
            col1, col2 = st.columns(2)
            with col1:
                st.button("Save Constitution", key="save_constitution", on_click=self._save,
                          use_container_width=True, type="primary")
            with col2:
                st.button("Cancel", key="cancel_constitution", on_click=self._cancel,
                          args=(state.constitution,), use_container_width=True)

    def render_downloads(self, model: Dict):
        st.markdown("### 📥 Download Constitution")
        col1, col2 = st.columns(2)

        with col1:
            st.download_button(
                label="📄 Download as DOCX",
                data=export_docx(model['title'], model['text']),
                file_name="league_constitution.docx",
                mime="application/vnd.openxmlformats-officedocument.wordprocessingml.document"
            )

        with col2:
            st.download_button(
                label="📕 Download as PDF",
                data=export_pdf(model['title'], model['text']),
                file_name="league_constitution.pdf",
                mime="application/pdf"
            )

    def render(self, state):
        model = self.build(state)
        st.header(model['title'])

        if model['user_id']:
            st.caption(f"Current User ID: `{model['user_id']}`")

        if self.editor.editing:
            self.render_editor(state)
            return

        with st.container(border=True):
            if not model['loaded']:
                st.info("Loading constitution...")
            elif model['text']:
                st.text(model['text'])
            else:
                st.info(EMPTY_CONTENT_TEXT)

            st.button("Edit Constitution", key="edit_constitution", on_click=self._begin,
                      args=(state.constitution,))

        if model['exists'] and model['text']:
            self.render_downloads(model)
