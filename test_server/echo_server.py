#!/usr/bin/env python3

from flask import Flask, request, jsonify

app = Flask(__name__)

HOME_PAGE = '''<!DOCTYPE html>
<html>
<head>
    <title>Echo Server</title>
</head>
<body>
    <h1>Echo Server</h1>
    <p>Send anything to /echo and it comes straight back</p>
</body>
</html>
'''

# Most recent request seen by /echo, for tests that look at what arrived
last_request = {}


@app.route('/')
def home():
    return HOME_PAGE


@app.route('/echo', methods=['GET', 'DELETE', 'PUT', 'POST'])
@app.route('/echo/<path:subpath>', methods=['GET', 'DELETE', 'PUT', 'POST'])
def echo(subpath=''):
    last_request.clear()
    last_request.update({
        'method': request.method,
        'path': request.path,
        'headers': dict(request.headers),
        'body': request.get_data(as_text=True),
    })
    return jsonify(last_request)


@app.route('/status/<int:code>')
def status(code):
    return f"status {code}", code


if __name__ == '__main__':
    print("Starting echo server on http://localhost:8000")
    app.run(host='0.0.0.0', port=8000, debug=True)
