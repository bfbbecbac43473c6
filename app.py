import asyncio
import logging
import os
import uuid

from flask import Flask, request, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge
from werkzeug.utils import secure_filename

from answers import check_answer
from config import ALLOWED_MIME_TYPES, Settings
from errors import MCQError, UploadError
from extractors import PDF_TYPE, extract_text, read_bytes, truncate_content
from generator import QuestionGenerator
from pdf_utils import extract_pdf_metadata

logger = logging.getLogger(__name__)


def save_upload(file, upload_folder):
    filename = secure_filename(file.filename) or 'upload'
    filepath = os.path.join(upload_folder, f'{uuid.uuid4().hex}-{filename}')
    file.save(filepath)
    return filepath


def remove_upload(filepath):
    try:
        os.remove(filepath)
    except OSError:
        logger.exception('Error deleting file %s', filepath)


def create_app(settings=None, generator=None):
    settings = settings or Settings.from_env()
    generator = generator or QuestionGenerator(settings)

    app = Flask(__name__)
    app.config['MAX_CONTENT_LENGTH'] = settings.max_upload_bytes
    CORS(app, origins='*', send_wildcard=True, methods=['GET', 'POST'], allow_headers=['Content-Type'])
    os.makedirs(settings.upload_folder, exist_ok=True)

    @app.errorhandler(MCQError)
    def handle_mcq_error(error):
        return jsonify({'error': error.message}), error.status_code

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(error):
        limit_mb = settings.max_upload_bytes // (1024 * 1024)
        return jsonify({'error': f'File too large. Maximum size is {limit_mb}MB.'}), 413

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        if isinstance(error, HTTPException):
            return error
        logger.exception('Error processing request')
        return jsonify({'error': 'An unexpected error occurred'}), 500

    @app.route('/', methods=['GET'])
    def index():
        return 'MCQ Generator API is running'

    @app.route('/generate-questions', methods=['POST'])
    async def generate_questions():
        if 'file' not in request.files:
            raise UploadError('No file uploaded')
        file = request.files['file']
        if file.filename == '':
            raise UploadError('Empty filename')
        file_type = file.mimetype
        if file_type not in ALLOWED_MIME_TYPES:
            raise UploadError('Invalid file type. Only TXT, PDF, DOCX, and DOC are allowed.')

        num_questions = request.form.get('numQuestions', type=int, default=5)
        difficulty = request.form.get('difficulty') or 'medium'
        start_page = request.form.get('startPage', type=int)
        end_page = request.form.get('endPage', type=int)
        page_range = None
        if start_page is not None or end_page is not None:
            page_range = (start_page or 1, end_page)

        filepath = save_upload(file, settings.upload_folder)
        try:
            file_size = os.path.getsize(filepath)
            if file_size == 0:
                raise UploadError('Uploaded file is empty')

            data = None
            if file_type == PDF_TYPE:
                data = await asyncio.to_thread(read_bytes, filepath)
            content = await extract_text(filepath, file_type, page_range, data)
            pdf_info = None
            if data is not None:
                pdf_info = await asyncio.to_thread(extract_pdf_metadata, data)

            if not content.strip():
                raise UploadError('Failed to extract content or file is empty')
            content = truncate_content(content, settings.max_content_chars)

            questions = await generator.generate(content, num_questions, difficulty)
        finally:
            remove_upload(filepath)

        return jsonify({
            'questions': [q.to_dict() for q in questions],
            'metadata': {
                'fileType': file_type,
                'fileSize': file_size,
                'fileName': file.filename,
                'pdfInfo': pdf_info,
            },
        })

    @app.route('/check-answer', methods=['POST'])
    def check_answer_route():
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            payload = {}
        result = check_answer(payload)
        return jsonify(result.to_dict())

    return app


def main():
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    app = create_app(settings)
    logger.info('Server running on port %d', settings.port)
    app.run(host=settings.host, port=settings.port)


if __name__ == '__main__':
    main()
