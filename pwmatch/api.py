from flask import Flask, jsonify, request

from pwmatch.config import load_config, ranked_dicts_from_config
from pwmatch.matching import omnimatch
from pwmatch.scoring import most_guessable_match_sequence

app = Flask(__name__)


def _read_request():
    data = request.get_json(silent=True) or {}
    password = data.get('password')
    if not isinstance(password, str):
        return None, None, (jsonify({'error': "'password' must be a string"}), 400)
    user_inputs = data.get('user_inputs', [])
    if not isinstance(user_inputs, list) or not all(isinstance(w, str) for w in user_inputs):
        return None, None, (jsonify({'error': "'user_inputs' must be a list of strings"}), 400)
    return password, user_inputs, None


def _matches(password, user_inputs):
    cfg = load_config()
    inputs = list(cfg.get('user_inputs') or []) + user_inputs
    return omnimatch(password, inputs, ranked_dicts_from_config(cfg))


@app.route('/')
def home():
    return jsonify({
        "message": "pwmatch API is running"
    })


@app.route('/match', methods=['POST'])
def match_route():
    password, user_inputs, error = _read_request()
    if error:
        return error
    matches = _matches(password, user_inputs)
    return jsonify({'password': password, 'matches': [m.as_dict() for m in matches]})


@app.route('/score', methods=['POST'])
def score_route():
    password, user_inputs, error = _read_request()
    if error:
        return error
    result = most_guessable_match_sequence(password, _matches(password, user_inputs))
    return jsonify({
        'password': password,
        'guesses': float(result.guesses),
        'guesses_log10': result.guesses_log10,
        'sequence': [m.as_dict() for m in result.sequence],
    })


if __name__ == "__main__":
    app.run(debug=True)
