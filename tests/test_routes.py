"""Tests for the HTTP adapter."""

from monitoring.exceptions import error_handler

UPLOAD = (
    'BEGIN:VCALENDAR\r\nVERSION:2.0\r\nPRODID:-//Some Client//EN\r\n'
    'BEGIN:VTODO\r\nUID:{uid}\r\nDTSTAMP:20181201T011204Z\r\nSUMMARY:Uploaded\r\n'
    'END:VTODO\r\nEND:VCALENDAR\r\n'
)


class TestAuth:

    def test_requires_credentials(self, client):
        response = client.get('/calendars/1/')

        assert response.status_code == 401
        assert 'Basic realm=' in response.headers['WWW-Authenticate']

    def test_wrong_password(self, client, auth_header):
        response = client.get('/calendars/1/', headers=auth_header(password='wrong'))

        assert response.status_code == 401

    def test_unknown_user(self, client, auth_header):
        response = client.get('/calendars/1/', headers=auth_header(username='ghost'))

        assert response.status_code == 401


class TestHealthAndOptions:

    def test_health(self, client):
        response = client.get('/health')

        assert response.status_code == 200
        assert response.get_json()['status'] == 'healthy'

    def test_health_counts_failed_logins(self, client, auth_header):
        error_handler.reset_stats()
        client.get('/calendars/1/', headers=auth_header(password='wrong'))

        assert client.get('/health').get_json()['error_count'] == 1
        assert 'auth:AUTH_FAILED' in error_handler.get_error_stats()['error_counts']

    def test_options(self, client):
        response = client.open('/', method='OPTIONS')

        assert 'calendar-access' in response.headers['DAV']
        assert 'PUT' in response.headers['Allow']


class TestCalendarRoutes:

    def test_get_calendar(self, client, auth_header):
        response = client.get('/calendars/1/calendar.ics', headers=auth_header())

        assert response.status_code == 200
        assert response.mimetype == 'text/calendar'
        assert 'UID:uid-1' in response.get_data(as_text=True)
        assert response.headers['ETag'].startswith('"')

    def test_get_collection(self, client, auth_header):
        response = client.get('/calendars/1/', headers=auth_header())

        assert response.status_code == 200
        assert 'BEGIN:VCALENDAR' in response.get_data(as_text=True)

    def test_get_single_task(self, client, auth_header):
        response = client.get('/calendars/1/uid-1.ics', headers=auth_header())

        assert response.status_code == 200
        assert 'SUMMARY:Existing task' in response.get_data(as_text=True)

    def test_get_missing_task(self, client, auth_header):
        response = client.get('/calendars/1/nope.ics', headers=auth_header())

        assert response.status_code == 404

    def test_forbidden_list(self, client, auth_header):
        response = client.get('/calendars/4/', headers=auth_header())

        assert response.status_code == 403
        assert response.get_json()['code'] == 'ACCESS_DENIED'

    def test_put_creates_then_updates(self, client, auth_header, repository):
        created = client.put('/calendars/1/up.ics', data=UPLOAD.format(uid='up'), headers=auth_header())
        updated = client.put('/calendars/1/up.ics', data=UPLOAD.format(uid='up'), headers=auth_header())

        assert created.status_code == 201
        assert updated.status_code == 204
        assert 'ETag' in created.headers
        assert repository.get_task_by_uid(1, 'up').title == 'Uploaded'

    def test_put_with_uid_of_another_resource(self, client, auth_header):
        response = client.put('/calendars/1/foo.ics', data=UPLOAD.format(uid='bar'), headers=auth_header())

        assert response.status_code == 409
        assert response.get_json()['code'] == 'CONFLICT'
        assert client.get('/calendars/1/foo.ics', headers=auth_header()).status_code == 404
        assert client.get('/calendars/1/bar.ics', headers=auth_header()).status_code == 404

    def test_put_cannot_overwrite_task_under_new_name(self, client, auth_header, repository):
        response = client.put('/calendars/1/new.ics', data=UPLOAD.format(uid='uid-1'), headers=auth_header())

        assert response.status_code == 409
        assert repository.get_task_by_uid(1, 'uid-1').title == 'Existing task'

    def test_put_existing_task_under_its_own_name(self, client, auth_header, repository):
        response = client.put('/calendars/1/uid-1.ics', data=UPLOAD.format(uid='uid-1'), headers=auth_header())

        assert response.status_code == 204
        assert repository.get_task_by_uid(1, 'uid-1').title == 'Uploaded'

    def test_put_with_malformed_optional_field_is_accepted(self, client, auth_header, repository):
        content = UPLOAD.format(uid='lenient').replace('SUMMARY:Uploaded', 'SUMMARY:Uploaded\r\nPRIORITY:high')

        response = client.put('/calendars/1/lenient.ics', data=content, headers=auth_header())

        assert response.status_code == 201
        assert repository.get_task_by_uid(1, 'lenient').priority == 0

    def test_put_malformed_is_bad_request(self, client, auth_header):
        response = client.put('/calendars/1/bad.ics', data='SUMMARY:no block', headers=auth_header())

        assert response.status_code == 400
        assert response.get_json()['code'] == 'DATA_PARSING_ERROR'

    def test_delete_task(self, client, auth_header, repository):
        response = client.delete('/calendars/1/uid-1.ics', headers=auth_header())

        assert response.status_code == 204
        assert repository.get_task_by_uid(1, 'uid-1') is None


class TestSharingRoutes:

    def test_create_share(self, client, auth_header, repository):
        response = client.put('/lists/1/teams', json={'team_id': 1, 'right': 2}, headers=auth_header())

        assert response.status_code == 201
        assert response.get_json()['right'] == 2
        assert repository.get_team_list(1, 1) is not None

    def test_create_duplicate_share(self, client, auth_header):
        response = client.put('/lists/1/teams', json={'team_id': 2, 'right': 0}, headers=auth_header())

        assert response.status_code == 409

    def test_create_with_invalid_right(self, client, auth_header):
        response = client.put('/lists/1/teams', json={'team_id': 1, 'right': 500}, headers=auth_header())

        assert response.status_code == 400

    def test_create_without_team(self, client, auth_header):
        response = client.put('/lists/1/teams', json={'right': 0}, headers=auth_header())

        assert response.status_code == 400

    def test_read_all(self, client, auth_header):
        response = client.get('/lists/1/teams', headers=auth_header())

        assert response.status_code == 200
        assert response.get_json() == [{'id': 2, 'name': 'team two', 'right': 1}]

    def test_update_share(self, client, auth_header, repository):
        response = client.post('/lists/1/teams/2', json={'right': 2}, headers=auth_header())

        assert response.status_code == 200
        assert int(repository.get_team_list(2, 1).right) == 2

    def test_delete_share(self, client, auth_header, repository):
        response = client.delete('/lists/1/teams/2', headers=auth_header())

        assert response.status_code == 200
        assert response.get_json() == {'message': 'Successfully deleted.'}
        assert repository.get_team_list(2, 1) is None

    def test_delete_needs_admin(self, client, auth_header, repository):
        response = client.delete('/lists/3/teams/1', headers=auth_header())

        assert response.status_code == 403
        assert repository.get_team_list(1, 3) is not None

    def test_delete_with_bad_team_param(self, client, auth_header):
        response = client.delete('/lists/1/teams/abc', headers=auth_header())

        assert response.status_code == 400
