import json
import os
import threading

from flask import Flask, Response, jsonify

from cycle_overlay.config import OUTPUT_JSON, WEB_SERVER_HOST, WEB_SERVER_PORT

app = Flask(__name__)

# Live overlay attached by the monitor; None until attach_overlay() is called
app.config["OVERLAY"] = None
app.config["OUTPUT_JSON"] = str(OUTPUT_JSON)


def attach_overlay(overlay, output_json=None):
    app.config["OVERLAY"] = overlay
    if output_json is not None:
        app.config["OUTPUT_JSON"] = str(output_json)


@app.route('/api/live_data')
def get_live_data():
    json_file_path = app.config["OUTPUT_JSON"]
    app.logger.debug(f"Looking for JSON file at: {json_file_path}")
    if not os.path.exists(json_file_path):
        app.logger.error(f"JSON file not found: {json_file_path}")
        return Response(f"File Not Found: {os.path.basename(json_file_path)}", status=404)
    try:
        with open(json_file_path, 'r', encoding='utf-8') as f:
            return Response(f.read(), status=200, mimetype='application/json')
    except OSError as e:
        app.logger.error(f"Error reading JSON file: {e}")
        return Response(f"Error reading file: {e}", status=500)


@app.route('/api/overlay')
def get_overlay():
    overlay = app.config["OVERLAY"]
    if overlay is None:
        return Response(json.dumps({"error": "overlay not attached"}), status=503, mimetype='application/json')
    return jsonify(overlay.snapshot())


@app.route('/')
def index():
    app.logger.debug("Serving root endpoint")
    return Response("Flask server is running!", status=200)


def start_server(host=WEB_SERVER_HOST, port=WEB_SERVER_PORT):
    try:
        app.logger.info("Starting Flask server...")
        server_thread = threading.Thread(target=app.run, kwargs={
            'host': host,
            'port': port,
            'debug': False,
            'use_reloader': False,
            'threaded': True
        })
        server_thread.daemon = True
        server_thread.start()
        app.logger.info(f"Server started at http://{host}:{port}")
        return server_thread
    except RuntimeError as e:
        app.logger.error(f"Failed to start server: {e}")
        return None
