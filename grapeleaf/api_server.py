#!/usr/bin/env python3
"""
Grape Leaf Classifier API Server
Upload one leaf photo, get the predicted condition plus the original and segmented images.
"""

import os
import logging
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from flask import Flask, request, jsonify
from flask_cors import CORS

from .exceptions import ContextError, DecodeError, ModelLoadError, UnknownClassError
from .models.disease_record import CLASS_NAMES, DISEASE_RECORDS
from .pipeline.classify_leaf import classify_leaf
from .services.image_service import ImageService
from .services.inference_service import InferenceService
from .services.segmentation_service import SegmentationService

app = Flask(__name__)
CORS(app)  # Enable CORS for frontend communication

# Configuration
MAX_CONTENT_LENGTH = int(os.getenv("MAX_UPLOAD_SIZE_MB", "16")) * 1024 * 1024
app.config['MAX_CONTENT_LENGTH'] = MAX_CONTENT_LENGTH

logger = logging.getLogger(__name__)

# Initialize services (the model itself loads on first use or in main())
image_service = ImageService()
segmentation_service = SegmentationService()
_inference_service = None


def get_inference_service() -> InferenceService:
    global _inference_service
    if _inference_service is None:
        _inference_service = InferenceService()
    return _inference_service


def error_response(message: str, status: int):
    return jsonify({'success': False, 'message': message}), status


@app.route('/api/classify', methods=['POST'])
def classify():
    """Classify one uploaded leaf image."""
    file = request.files.get('image')
    if file is None or file.filename == '':
        return error_response('Please upload an image first.', 400)

    try:
        result = classify_leaf(
            file.stream.read(),
            inference_service=get_inference_service(),
            image_service=image_service,
            segmentation_service=segmentation_service,
        )
    except DecodeError as e:
        logger.error(f"Decode error for {file.filename!r}: {e}")
        return error_response('The uploaded file is not a readable image.', 400)
    except ModelLoadError as e:
        logger.error(f"Model unavailable: {e}")
        return error_response('The classification model is not available.', 503)
    except (ContextError, UnknownClassError) as e:
        logger.error(f"Classification failed for {file.filename!r}: {e}")
        return error_response('Error processing image.', 500)

    logger.info(f"{file.filename!r} → {result.label}")
    return jsonify({
        'success': True,
        'prediction': result.label,
        'description': result.record.description,
        'remedy': result.record.remedy,
        'scores': dict(zip(CLASS_NAMES, result.scores)),
        'original_image': image_service.to_data_url(result.original),
        'segmented_image': image_service.to_data_url(result.segmented),
    })


@app.route('/api/classes', methods=['GET'])
def list_classes():
    """Static disease table, in model output order."""
    return jsonify({
        'classes': [
            {
                'index': i,
                'label': name,
                'description': DISEASE_RECORDS[name].description,
                'remedy': DISEASE_RECORDS[name].remedy,
            }
            for i, name in enumerate(CLASS_NAMES)
        ]
    })


@app.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({
        'status': 'healthy',
        'message': 'Grape Leaf Classifier API is running',
        'model_loaded': _inference_service is not None and _inference_service.is_ready,
        'segmentation_strategy': segmentation_service.repo.strategy,
    })


@app.errorhandler(413)
def too_large(e):
    """Handle file too large error."""
    return error_response(f'File too large. Maximum size is {MAX_CONTENT_LENGTH // (1024 * 1024)}MB.', 413)


@app.errorhandler(500)
def internal_error(e):
    """Handle internal server error."""
    logger.error(f"Internal server error: {e}")
    return error_response('Internal server error', 500)


def main():
    # --- Centralized Logging Configuration ---
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )

    host = os.getenv("API_HOST", "127.0.0.1")
    port = int(os.getenv("API_PORT", "5000"))

    logger.info("Loading classifier before accepting requests...")
    get_inference_service().warm_up()

    logger.info(f"Max upload size: {MAX_CONTENT_LENGTH // (1024 * 1024)}MB")
    logger.info(f"Segmentation strategy: {segmentation_service.repo.strategy}")
    logger.info(f"Serving on http://{host}:{port}")
    app.run(host=host, port=port, debug=False)


if __name__ == '__main__':
    main()
