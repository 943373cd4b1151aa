"""CalDAV and list sharing route handlers for Tasklist CalDAV Server."""

import logging

from flask import request, Response, jsonify, g

from domain import TeamList

logger = logging.getLogger(__name__)

CALENDAR_MIMETYPE = 'text/calendar; charset=utf-8'


def register_caldav_routes(app, caldav_service, requires_auth):
    """Register CalDAV resource routes."""

    @app.route('/calendars/<int:project_id>/', methods=['GET'])
    @app.route('/calendars/<int:project_id>/calendar.ics', methods=['GET'])
    @requires_auth
    def get_full_calendar(project_id):
        """Get full calendar for a list."""
        calendar_data = caldav_service.get_calendar_data(g.user, project_id)
        return Response(
            calendar_data,
            mimetype=CALENDAR_MIMETYPE,
            headers={'ETag': caldav_service.get_etag(project_id)}
        )

    @app.route('/calendars/<int:project_id>/<uid>.ics', methods=['GET'])
    @requires_auth
    def get_calendar_task(project_id, uid):
        """Get a single task as a calendar."""
        task_data = caldav_service.get_task_data(g.user, project_id, uid)
        return Response(
            task_data,
            mimetype=CALENDAR_MIMETYPE,
            headers={'ETag': caldav_service.get_etag(project_id, uid)}
        )

    @app.route('/calendars/<int:project_id>/<uid>.ics', methods=['PUT'])
    @requires_auth
    def put_calendar_task(project_id, uid):
        """Create or update a task from a VTODO upload."""
        content = request.get_data(as_text=True)
        task, created = caldav_service.put_task(g.user, project_id, content, uid=uid)
        return Response(
            status=201 if created else 204,
            headers={'ETag': caldav_service.get_etag(project_id, task.uid)}
        )

    @app.route('/calendars/<int:project_id>/<uid>.ics', methods=['DELETE'])
    @requires_auth
    def delete_calendar_task(project_id, uid):
        caldav_service.delete_task(g.user, project_id, uid)
        return Response(status=204)


def _share_to_dict(share: TeamList) -> dict:
    return {
        'id': share.id,
        'team_id': share.team_id,
        'list_id': share.list_id,
        'right': int(share.right),
        'created': share.created.isoformat() if share.created else None,
        'updated': share.updated.isoformat() if share.updated else None
    }


def register_sharing_routes(app, team_list_service, requires_auth):
    """Register routes that share lists with teams."""

    def bind_share(list_id, team_id=None):
        payload = request.get_json(silent=True) or {}
        team_id = team_id if team_id is not None else payload.get('team_id')
        if team_id is None:
            return None
        try:
            team_id = int(team_id)
        except (TypeError, ValueError):
            return None
        return TeamList(team_id=team_id, list_id=list_id, right=payload.get('right', 0))

    def bad_request():
        return jsonify({'message': 'Invalid URL param.'}), 400

    def forbidden(action, share):
        logger.info(
            f"User {g.user.id} tried to {action} team {share.team_id} "
            f"on list {share.list_id} without the rights for it"
        )
        return jsonify({'message': 'Forbidden'}), 403

    @app.route('/lists/<int:list_id>/teams', methods=['PUT'])
    @requires_auth
    def create_team_list(list_id):
        share = bind_share(list_id)
        if share is None:
            return bad_request()
        if not team_list_service.can_create(g.user, share):
            return forbidden('share with', share)
        share = team_list_service.create(g.user, share)
        return jsonify(_share_to_dict(share)), 201

    @app.route('/lists/<int:list_id>/teams', methods=['GET'])
    @requires_auth
    def read_all_team_lists(list_id):
        teams = team_list_service.read_all(g.user, list_id)
        return jsonify([
            {'id': team.id, 'name': team.name, 'right': int(right)}
            for team, right in teams
        ])

    @app.route('/lists/<int:list_id>/teams/<team_id>', methods=['POST'])
    @requires_auth
    def update_team_list(list_id, team_id):
        share = bind_share(list_id, team_id)
        if share is None:
            return bad_request()
        if not team_list_service.can_update(g.user, share):
            return forbidden('update', share)
        share = team_list_service.update(share)
        return jsonify(_share_to_dict(share))

    @app.route('/lists/<int:list_id>/teams/<team_id>', methods=['DELETE'])
    @requires_auth
    def delete_team_list(list_id, team_id):
        share = bind_share(list_id, team_id)
        if share is None:
            return bad_request()
        if not team_list_service.can_delete(g.user, share):
            return forbidden('delete', share)
        team_list_service.delete(share)
        return jsonify({'message': 'Successfully deleted.'})
