"""
WebSocket manager for real-time user notifications
"""

import json
import logging
from typing import Dict, List
from fastapi import APIRouter, WebSocket, WebSocketDisconnect, Depends

from noravenolife.utils.security import get_session_user, verify_admin_token

logger = logging.getLogger(__name__)

class WebSocketManager:
    """Manages WebSocket connections, one room per signed-in user"""

    def __init__(self):
        # user_id -> list of websockets
        self.active_connections: Dict[str, List[WebSocket]] = {}

    async def connect(self, websocket: WebSocket, user_id: str):
        """Accept WebSocket connection and add to the user's room"""
        await websocket.accept()

        if user_id not in self.active_connections:
            self.active_connections[user_id] = []

        self.active_connections[user_id].append(websocket)
        logger.info(f"WebSocket connected for user {user_id}. Total connections: {len(self.active_connections[user_id])}")

    def disconnect(self, websocket: WebSocket, user_id: str):
        """Remove WebSocket connection from the user's room"""
        if user_id in self.active_connections:
            try:
                self.active_connections[user_id].remove(websocket)
                logger.info(f"WebSocket disconnected for user {user_id}. Remaining connections: {len(self.active_connections[user_id])}")

                if not self.active_connections[user_id]:
                    del self.active_connections[user_id]
            except ValueError:
                # WebSocket was not in the list
                pass

    async def send_personal_message(self, message: dict, websocket: WebSocket):
        """Send message to specific WebSocket"""
        try:
            await websocket.send_text(json.dumps(message))
        except Exception as e:
            logger.error(f"Error sending personal message: {e}")

    async def broadcast_to_user(self, user_id: str, message: dict):
        """Send a message to every open connection of a user"""
        if user_id not in self.active_connections:
            logger.info(f"No active connections for user {user_id}")
            return

        connections = self.active_connections[user_id].copy()

        disconnected = []
        for websocket in connections:
            try:
                await websocket.send_text(json.dumps(message))
            except Exception as e:
                logger.error(f"Error broadcasting to websocket: {e}")
                disconnected.append(websocket)

        for websocket in disconnected:
            self.disconnect(websocket, user_id)

    def get_connection_count(self, user_id: str) -> int:
        """Get number of active connections for a user"""
        return len(self.active_connections.get(user_id, []))

    def get_all_connection_counts(self) -> Dict[str, int]:
        """Get connection counts for all users"""
        return {
            user_id: len(connections)
            for user_id, connections in self.active_connections.items()
        }

# Global WebSocket manager instance
websocket_manager = WebSocketManager()

# Router for WebSocket endpoints
router = APIRouter()

@router.websocket("/notifications")
async def notifications_websocket(websocket: WebSocket):
    """Push giveaway results to the signed-in user"""
    user = get_session_user(websocket)
    if not user:
        await websocket.close(code=4401, reason="Login required")
        return

    user_id = user["id"]
    await websocket_manager.connect(websocket, user_id)

    try:
        welcome_message = {
            "type": "connection",
            "message": "Connected to notifications",
            "connection_count": websocket_manager.get_connection_count(user_id)
        }
        await websocket_manager.send_personal_message(welcome_message, websocket)

        while True:
            data = await websocket.receive_text()
            try:
                client_message = json.loads(data)
            except json.JSONDecodeError:
                logger.warning(f"Invalid JSON received from WebSocket: {data}")
                continue

            if client_message.get("type") == "ping":
                pong_message = {
                    "type": "pong",
                    "timestamp": client_message.get("timestamp")
                }
                await websocket_manager.send_personal_message(pong_message, websocket)

    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.error(f"WebSocket error: {e}")
    finally:
        websocket_manager.disconnect(websocket, user_id)

@router.get("/stats")
async def websocket_stats(token: str = Depends(verify_admin_token)):
    """Get WebSocket connection statistics"""
    counts = websocket_manager.get_all_connection_counts()
    return {
        "total_users_with_connections": len(counts),
        "connection_counts": counts,
        "total_connections": sum(counts.values())
    }
