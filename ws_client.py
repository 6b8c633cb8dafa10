"""Simple WebSocket client that prints outline paths from the /ws endpoint."""
import asyncio
import json
import websockets


async def watch_paths():
    uri = "ws://127.0.0.1:8000/ws"
    print(f"Connecting to {uri}...")

    try:
        async with websockets.connect(uri) as websocket:
            print("Connected!")

            # Receive 3 messages
            for i in range(3):
                message = await websocket.recv()
                data = json.loads(message)

                if data["type"] == "state":
                    blobs = data["payload"]["blobs"]
                    print(f"\n--- Message {i+1} ---")
                    print(f"Blob count: {len(blobs)}")
                    visible = [b for b in blobs if b["vertex_count"] > 0]
                    if visible:
                        b = visible[0]
                        print(f"Blob {b['index']} ({b['vertex_count']} vertices, tick {b['ticks']}): "
                              f"{b['path'][:80]}...")
                else:
                    print(f"Unexpected message type: {data['type']}")
                    print(f"Message: {data}")

    except (OSError, websockets.exceptions.WebSocketException) as e:
        print(f"Error: {e}")


if __name__ == "__main__":
    asyncio.run(watch_paths())
