from __future__ import annotations

import mimetypes
import os
import sys
import urllib.error
from pathlib import Path

import streamlit as st

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from common import build_multipart_payload, form_layout, http_error_detail, request_json
from packages.application.config import load_config


st.set_page_config(page_title='Table Extraction & Form Generator', layout='wide')

default_api_base_url = os.getenv('API_BASE_URL', 'http://api:8000')
api_base_url = st.sidebar.text_input('API Base URL', value=default_api_base_url)
upload_timeout_seconds = int(os.getenv('UPLOAD_TIMEOUT_SECONDS', '120'))
max_preview_rows = load_config().max_preview_rows

st.title('Table Extraction & Form Generator')
st.info(
    'Upload any tabular document and the system will extract the data and generate a form '
    'for each row. The column headers are used as form field labels.\n\n'
    'Supported formats: Excel (.xlsx, .xls, .xlsb), CSV, PDF with tables, Word documents (.docx), '
    'and plain text / TSV files.'
)

if 'table_result' not in st.session_state:
    st.session_state['table_result'] = None
if 'show_all_rows' not in st.session_state:
    st.session_state['show_all_rows'] = False

upload_file = st.file_uploader(
    'Insert Table Document',
    type=['xlsx', 'xlsm', 'xls', 'xlsb', 'csv', 'pdf', 'docx', 'txt', 'tsv'],
)

if upload_file is not None and st.button('Extract table', type='primary'):
    content_type = upload_file.type or mimetypes.guess_type(upload_file.name)[0]
    payload_bytes, multipart_type = build_multipart_payload(
        file_field='file',
        file_name=upload_file.name,
        file_bytes=upload_file.getvalue(),
        file_content_type=content_type or 'application/octet-stream',
    )
    st.session_state['table_result'] = None
    st.session_state['show_all_rows'] = False
    with st.spinner('Analyzing file and extracting tables...'):
        try:
            st.session_state['table_result'] = request_json(
                f'{api_base_url}/upload',
                method='POST',
                data=payload_bytes,
                headers={'Content-Type': multipart_type},
                timeout=upload_timeout_seconds,
            )
        except urllib.error.HTTPError as exc:
            detail = http_error_detail(exc)
            if exc.code >= 500:
                st.error(f'Server error: {detail}')
            else:
                st.error(detail)
        except TimeoutError:
            st.error(
                'Upload timed out. '
                f'Increase UPLOAD_TIMEOUT_SECONDS (current: {upload_timeout_seconds}).'
            )
        except urllib.error.URLError as exc:
            st.error(f'Unable to reach the API: {exc}')

result = st.session_state.get('table_result')
if result:
    headers = [str(h) for h in result.get('headers') or []]
    rows = [row for row in result.get('tableData') or [] if isinstance(row, dict)]
    st.success(f"Detected file type: {result.get('fileType')}")
    if result.get('strategy'):
        st.caption(f"Extraction strategy: {result['strategy']}")

    if form_layout(len(rows), len(headers)) == 'single':
        st.subheader('Extracted Form Data')
        row = rows[0]
        with st.form('row-form-0'):
            columns = st.columns(3)
            for idx, header in enumerate(headers):
                columns[idx % 3].text_input(header, value=str(row.get(header, '')), key=f'f-0-{idx}')
            st.form_submit_button('Save', disabled=True)
    else:
        st.subheader(f'Generated Forms ({len(rows)})')
        if len(rows) > 1:
            st.caption('Each form represents a row from the extracted table')

        show_all = st.session_state['show_all_rows']
        visible = rows if show_all else rows[:max_preview_rows]
        grid = st.columns(3)
        for row_idx, row in enumerate(visible):
            with grid[row_idx % 3]:
                with st.form(f'row-form-{row_idx}'):
                    st.markdown(f'**Row {row_idx + 1}**')
                    for col_idx, header in enumerate(headers):
                        st.text_input(
                            header,
                            value=str(row.get(header, '')),
                            key=f'f-{row_idx}-{col_idx}',
                        )
                    st.form_submit_button('Save', disabled=True)

        if len(rows) > max_preview_rows and not show_all:
            st.caption(f'Showing {max_preview_rows} of {len(rows)} forms')
            if st.button('Show all forms'):
                st.session_state['show_all_rows'] = True
                st.rerun()
