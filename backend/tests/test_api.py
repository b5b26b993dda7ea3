def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    data = res.get_json()
    assert 'message' in data
    assert data['live_matches'] == 0


def test_unknown_match_is_404(client):
    res = client.get('/api/matches/NOPE00')
    assert res.status_code == 404
    assert res.get_json() == {'error': 'Match not found'}


def test_match_snapshot(flask_app, client, sio_client):
    sio_client.get_received('/')
    sio_client.emit('createMatch', namespace='/')
    code = next(p['args'][0]['matchCode'] for p in sio_client.get_received('/') if p['name'] == 'matchCreated')

    res = client.get(f'/api/matches/{code.lower()}')
    assert res.status_code == 200
    state = res.get_json()
    assert state['match_code'] == code
    assert state['state'] == 'waiting'
    assert state['players'] == {'player1': True, 'player2': False}
    creator_sid = flask_app.extensions['shadowbox'].registry.get(code).slot_a
    assert creator_sid not in str(state)
    assert state['current_round'] == 1
    assert state['total_rounds'] == 4

    assert client.get('/').get_json()['live_matches'] == 1


def test_index_counts_matches_under_service_lock(flask_app, client, monkeypatch):
    calls = []

    class RecordingLock:
        def __enter__(self):
            calls.append('acquire')

        def __exit__(self, *exc):
            calls.append('release')

    class RecordingRegistry:
        def __len__(self):
            calls.append('len')
            return 0

    service = flask_app.extensions['shadowbox']
    monkeypatch.setattr(service, 'lock', RecordingLock())
    monkeypatch.setattr(service, 'registry', RecordingRegistry())
    assert client.get('/').get_json()['live_matches'] == 0
    assert calls == ['acquire', 'len', 'release']
